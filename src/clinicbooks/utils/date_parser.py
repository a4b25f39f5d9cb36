"""Civil date parsing utilities."""

from typing import Optional

from dateutil import parser as date_parser

from clinicbooks.domain.calendar import (
    CalendarDate,
    civil_today,
    format_civil,
    month_end,
    month_start,
    previous_month_start,
    shift_days,
    week_start,
)
from clinicbooks.domain.errors import ValidationError
from clinicbooks.utils.amount_parser import normalize_digits

# Years at or above this are read as Gregorian input.
GREGORIAN_YEAR_THRESHOLD = 1700


def parse_date(date_str: str, today: Optional[CalendarDate] = None) -> CalendarDate:
    """Parse a date string into a civil date.

    Supports various formats including relative dates:
    - Civil dates: "1403/01/15", "1403-1-5", "۱۴۰۳/۰۱/۱۵"
    - Gregorian dates: "2024-04-03", "April 3, 2024" (converted to civil)
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to the current day)

    Returns:
        CalendarDate

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = normalize_digits(date_str.strip().lower())
    today = today or civil_today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": shift_days(today, -1),
        "tomorrow": shift_days(today, 1),
    }
    if text in relative_dates:
        return relative_dates[text]

    if text.startswith("last "):
        period = text[5:]
        if period == "month":
            return previous_month_start(today)
        elif period == "year":
            return CalendarDate(today.year - 1, 1, 1)
        elif period == "week":
            return shift_days(week_start(today), -7)
    elif text.startswith("this "):
        period = text[5:]
        if period == "month":
            return month_start(today)
        elif period == "year":
            return CalendarDate(today.year, 1, 1)
        elif period == "week":
            return week_start(today)

    # Civil Y/M/D with either separator
    civil_text = text.replace("-", "/")
    try:
        parsed = CalendarDate.parse(civil_text)
    except ValidationError as e:
        civil_error: Optional[ValidationError] = e
    else:
        if parsed.year < GREGORIAN_YEAR_THRESHOLD:
            return parsed
        civil_error = None

    # Anything else is read as a Gregorian date
    try:
        dt = date_parser.parse(text)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {civil_error or e}")
    if dt.year < GREGORIAN_YEAR_THRESHOLD:
        raise ValueError(f"Could not parse date '{date_str}': {civil_error or 'year out of range'}")
    return format_civil(dt.date())


def get_date_range(period: str, today: Optional[CalendarDate] = None) -> tuple[CalendarDate, CalendarDate]:
    """Get start and end civil dates for a specified period.

    Args:
        period: Period string (this-month, this-year, this-week, last-month, last-year, last-week)
        today: Reference day (defaults to the current day)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or civil_today()

    if period == "this-month":
        return (month_start(today), today)

    elif period == "this-year":
        return (CalendarDate(today.year, 1, 1), today)

    elif period == "this-week":
        return (week_start(today), today)

    elif period == "last-month":
        start_date = previous_month_start(today)
        return (start_date, month_end(start_date))

    elif period == "last-year":
        start_date = CalendarDate(today.year - 1, 1, 1)
        return (start_date, shift_days(CalendarDate(today.year, 1, 1), -1))

    elif period == "last-week":
        start_date = shift_days(week_start(today), -7)
        return (start_date, shift_days(start_date, 6))

    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: this-month, this-year, this-week, last-month, last-year, last-week")
