"""Civil (Jalali) calendar normalization.

Stored and user-facing dates are Jalali ``YYYY/MM/DD`` strings. Ordering and
range tests go through integer sort keys; day arithmetic goes through the
Gregorian calendar, using integer conversions in both directions.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Union

from clinicbooks.domain.errors import ValidationError, invalid_civil_date

EPOCH_ZERO = 0

_GREGORIAN_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_GREGORIAN_DAYS_BEFORE_MONTH = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)


def _is_gregorian_leap(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def jalali_to_gregorian(year: int, month: int, day: int) -> tuple[int, int, int]:
    """Convert a Jalali date to a Gregorian (year, month, day) triple.

    Jalali leap years follow the 33-year cycle (eight leap years per
    cycle); the resulting day number is split with Gregorian leap rules.
    """
    jy = year + 1595
    days = (
        -355668
        + 365 * jy
        + (jy // 33) * 8
        + ((jy % 33) + 3) // 4
        + day
        + ((month - 1) * 31 if month < 7 else (month - 7) * 30 + 186)
    )
    gy = 400 * (days // 146097)
    days %= 146097
    if days > 36524:
        days -= 1
        gy += 100 * (days // 36524)
        days %= 36524
        if days >= 365:
            days += 1
    gy += 4 * (days // 1461)
    days %= 1461
    if days > 365:
        gy += (days - 1) // 365
        days = (days - 1) % 365

    gd = days + 1
    month_days = list(_GREGORIAN_MONTH_DAYS)
    if _is_gregorian_leap(gy):
        month_days[1] = 29
    gm = 1
    while gm < 13 and gd > month_days[gm - 1]:
        gd -= month_days[gm - 1]
        gm += 1
    return gy, gm, gd


def gregorian_to_jalali(year: int, month: int, day: int) -> tuple[int, int, int]:
    """Convert a Gregorian date to a Jalali (year, month, day) triple."""
    gy2 = year + 1 if month > 2 else year
    days = (
        355666
        + 365 * year
        + (gy2 + 3) // 4
        - (gy2 + 99) // 100
        + (gy2 + 399) // 400
        + day
        + _GREGORIAN_DAYS_BEFORE_MONTH[month - 1]
    )
    jy = -1595 + 33 * (days // 12053)
    days %= 12053
    jy += 4 * (days // 1461)
    days %= 1461
    if days > 365:
        jy += (days - 1) // 365
        days = (days - 1) % 365

    if days < 186:
        jm = 1 + days // 31
        jd = 1 + days % 31
    else:
        jm = 7 + (days - 186) // 30
        jd = 1 + (days - 186) % 30
    return jy, jm, jd


def is_leap_year(year: int) -> bool:
    """Return True when the Jalali year has 366 days."""
    start = date(*jalali_to_gregorian(year, 1, 1))
    following = date(*jalali_to_gregorian(year + 1, 1, 1))
    return (following - start).days == 366


def month_length(year: int, month: int) -> int:
    """Number of days in a Jalali month."""
    if month <= 6:
        return 31
    if month <= 11:
        return 30
    return 30 if is_leap_year(year) else 29


@dataclass(frozen=True, order=True)
class CalendarDate:
    """Validated Jalali calendar date.

    Field order makes the natural dataclass ordering chronological.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        text = f"{self.year}/{self.month}/{self.day}"
        if not 1 <= self.year <= 9999:
            raise ValidationError(invalid_civil_date(text, "year out of range"))
        if not 1 <= self.month <= 12:
            raise ValidationError(invalid_civil_date(text, "month must be 1-12"))
        if not 1 <= self.day <= month_length(self.year, self.month):
            raise ValidationError(invalid_civil_date(text, "day out of range for month"))

    @classmethod
    def parse(cls, text: str) -> "CalendarDate":
        """Parse ``YYYY/MM/DD`` (month and day may be unpadded).

        Raises:
            ValidationError: If the text is not a valid civil date
        """
        parts = _split_segments(text)
        if parts is None:
            raise ValidationError(invalid_civil_date(str(text), "expected YYYY/MM/DD"))
        return cls(*parts)

    @classmethod
    def from_gregorian(cls, value: date) -> "CalendarDate":
        return cls(*gregorian_to_jalali(value.year, value.month, value.day))

    def to_gregorian(self) -> date:
        return date(*jalali_to_gregorian(self.year, self.month, self.day))

    @property
    def sort_key(self) -> int:
        return self.year * 10000 + self.month * 100 + self.day

    def __str__(self) -> str:
        return f"{self.year:04d}/{self.month:02d}/{self.day:02d}"


def _split_segments(text: Optional[str]) -> Optional[tuple[int, int, int]]:
    """Split ``Y/M/D`` into integers; None when malformed."""
    if not text or not isinstance(text, str):
        return None
    parts = text.strip().split("/")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(part.strip()) for part in parts)
    except ValueError:
        return None
    if year < 0 or month < 0 or day < 0:
        return None
    return year, month, day


def to_sort_key(value: Union[str, CalendarDate, None]) -> int:
    """Return the sortable integer key of a civil date.

    Malformed input (empty, wrong segment count, non-numeric segment) maps
    to ``EPOCH_ZERO`` so it sorts first instead of raising.
    """
    if isinstance(value, CalendarDate):
        return value.sort_key
    parts = _split_segments(value)
    if parts is None:
        return EPOCH_ZERO
    year, month, day = parts
    return year * 10000 + month * 100 + day


def parse_civil(text: Optional[str]) -> Optional[CalendarDate]:
    """Return the CalendarDate for ``text``, or None when it does not validate."""
    try:
        return CalendarDate.parse(text)  # type: ignore[arg-type]
    except ValidationError:
        return None


def normalize_civil(text: str) -> str:
    """Return canonical ``YYYY/MM/DD`` text, or ``text`` unchanged if invalid."""
    parsed = parse_civil(text)
    return str(parsed) if parsed is not None else text


def format_civil(value: date) -> CalendarDate:
    """Civil date of a native (Gregorian) date."""
    return CalendarDate.from_gregorian(value)


def civil_today() -> CalendarDate:
    return format_civil(date.today())


def shift_days(value: CalendarDate, days: int) -> CalendarDate:
    """Move a civil date by ``days`` (negative moves into the past)."""
    return format_civil(value.to_gregorian() + timedelta(days=days))


def month_start(value: CalendarDate) -> CalendarDate:
    return CalendarDate(value.year, value.month, 1)


def month_end(value: CalendarDate) -> CalendarDate:
    return CalendarDate(value.year, value.month, month_length(value.year, value.month))


def previous_month_start(value: CalendarDate) -> CalendarDate:
    if value.month == 1:
        return CalendarDate(value.year - 1, 12, 1)
    return CalendarDate(value.year, value.month - 1, 1)


# Saturday opens the civil week (Python weekday numbering).
WEEK_START_WEEKDAY = 5


def week_start(value: CalendarDate) -> CalendarDate:
    """Saturday on or before ``value``."""
    native = value.to_gregorian()
    return format_civil(native - timedelta(days=(native.weekday() - WEEK_START_WEEKDAY) % 7))


BaseDate = Union[CalendarDate, date, str]


def as_civil(value: BaseDate) -> CalendarDate:
    """Coerce a CalendarDate, native date or ``YYYY/MM/DD`` text.

    Raises:
        ValidationError: If text does not parse as a civil date
    """
    if isinstance(value, CalendarDate):
        return value
    if isinstance(value, date):
        return format_civil(value)
    return CalendarDate.parse(value)
