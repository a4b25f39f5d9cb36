"""Period windows and dense time series over unified transactions."""

from bisect import bisect_left, bisect_right
from decimal import Decimal
from itertools import accumulate
from typing import Sequence

from clinicbooks.domain.calendar import (
    BaseDate,
    CalendarDate,
    as_civil,
    month_end,
    month_start,
    previous_month_start,
    shift_days,
    to_sort_key,
    week_start,
)
from clinicbooks.domain.entities import (
    Direction,
    Granularity,
    Invoice,
    PeriodWindow,
    TimeBucket,
    UnifiedTransaction,
)
from clinicbooks.domain.errors import ValidationError, non_positive

DAILY_LABELS = ("Today", "Yesterday", "2 days ago")
WEEKLY_LABELS = ("This week", "Last week", "2 weeks ago")
MONTHLY_LABELS = ("This month", "Last month", "2 months ago")


class PeriodWindowEngine:
    """Aggregates one snapshot's transactions over civil date ranges.

    Sort keys are indexed once at construction; every window and bucket is
    then answered with two binary searches over prefix sums.
    """

    def __init__(
        self,
        transactions: Sequence[UnifiedTransaction],
        invoices: Sequence[Invoice] = (),
    ):
        ordered = sorted(transactions, key=lambda txn: txn.sort_key)
        self._keys = [txn.sort_key for txn in ordered]
        zero = Decimal("0")
        self._inflow_sums = [zero] + list(
            accumulate(
                txn.amount if txn.direction == Direction.INFLOW else zero
                for txn in ordered
            )
        )
        self._outflow_sums = [zero] + list(
            accumulate(
                txn.amount if txn.direction == Direction.OUTFLOW else zero
                for txn in ordered
            )
        )

        keyed_invoices = sorted(
            ((to_sort_key(inv.date), inv) for inv in invoices), key=lambda pair: pair[0]
        )
        self._invoice_keys = [key for key, _ in keyed_invoices]
        self._invoices = [inv for _, inv in keyed_invoices]

    def _totals(self, start_key: int, end_key: int) -> tuple[Decimal, Decimal]:
        lo = bisect_left(self._keys, start_key)
        hi = bisect_right(self._keys, end_key)
        inflow = self._inflow_sums[hi] - self._inflow_sums[lo]
        outflow = self._outflow_sums[hi] - self._outflow_sums[lo]
        return inflow, outflow

    def _invoices_between(self, start_key: int, end_key: int) -> tuple[Invoice, ...]:
        lo = bisect_left(self._invoice_keys, start_key)
        hi = bisect_right(self._invoice_keys, end_key)
        return tuple(self._invoices[lo:hi])

    def window(
        self,
        base_date: BaseDate,
        length_days: int,
        offset_days: int = 0,
        label: str = "",
    ) -> PeriodWindow:
        """Aggregate the ``length_days`` days ending ``offset_days`` before base.

        Both ends are inclusive.

        Raises:
            ValidationError: If length_days is less than 1
        """
        if length_days < 1:
            raise ValidationError(non_positive("length_days", length_days))
        base = as_civil(base_date)
        end = shift_days(base, -offset_days)
        start = shift_days(end, -(length_days - 1))
        start_key, end_key = start.sort_key, end.sort_key
        inflow, outflow = self._totals(start_key, end_key)
        return PeriodWindow(
            label=label or f"{start} - {end}",
            start=str(start),
            end=str(end),
            start_key=start_key,
            end_key=end_key,
            total_inflow=inflow,
            total_outflow=outflow,
            invoices_in_range=self._invoices_between(start_key, end_key),
        )

    def day(self, base_date: BaseDate, offset_days: int = 0, label: str = "") -> PeriodWindow:
        """Single civil day ``offset_days`` before base."""
        return self.window(base_date, 1, offset_days, label)

    def comparisons(self, base_date: BaseDate) -> dict[str, list[PeriodWindow]]:
        """Daily, weekly and monthly comparison triples, newest first."""
        return {
            "daily": [
                self.day(base_date, offset, label)
                for offset, label in zip((0, 1, 2), DAILY_LABELS)
            ],
            "weekly": [
                self.window(base_date, 7, offset, label)
                for offset, label in zip((0, 7, 14), WEEKLY_LABELS)
            ],
            "monthly": [
                self.window(base_date, 30, offset, label)
                for offset, label in zip((0, 30, 60), MONTHLY_LABELS)
            ],
        }

    def buckets(
        self,
        base_date: BaseDate,
        count: int,
        granularity: Granularity = Granularity.WEEK,
    ) -> list[TimeBucket]:
        """Dense series of ``count`` buckets ending at the bucket holding base.

        Buckets are contiguous and do not overlap, so every transaction in
        the span is counted in exactly one of them. Oldest bucket first.

        Raises:
            ValidationError: If count is less than 1
        """
        if count < 1:
            raise ValidationError(non_positive("count", count))
        base = as_civil(base_date)
        granularity = Granularity(granularity)

        ranges = bucket_ranges(base, count, granularity)
        result = []
        for start, end in ranges:
            inflow, outflow = self._totals(start.sort_key, end.sort_key)
            result.append(
                TimeBucket(
                    label=bucket_label(start, granularity),
                    start_key=start.sort_key,
                    end_key=end.sort_key,
                    inflow=inflow,
                    outflow=outflow,
                )
            )
        return result


def bucket_ranges(
    base: CalendarDate, count: int, granularity: Granularity
) -> list[tuple[CalendarDate, CalendarDate]]:
    """Inclusive (start, end) civil ranges of a trailing series, oldest first."""
    ranges: list[tuple[CalendarDate, CalendarDate]] = []
    if granularity == Granularity.DAY:
        for back in range(count - 1, -1, -1):
            day = shift_days(base, -back)
            ranges.append((day, day))
    elif granularity == Granularity.WEEK:
        first = week_start(base)
        for back in range(count - 1, -1, -1):
            start = shift_days(first, -7 * back)
            ranges.append((start, shift_days(start, 6)))
    else:
        start = month_start(base)
        for _ in range(count):
            ranges.append((start, month_end(start)))
            start = previous_month_start(start)
        ranges.reverse()
    return ranges


def bucket_label(start: CalendarDate, granularity: Granularity) -> str:
    if granularity == Granularity.MONTH:
        return f"{start.year:04d}/{start.month:02d}"
    return f"{start.month:02d}/{start.day:02d}"
