"""Tests for period windows and time series."""

import pytest
from decimal import Decimal

from clinicbooks.domain.calendar import CalendarDate, to_sort_key
from clinicbooks.domain.entities import (
    Direction,
    Granularity,
    Invoice,
    InvoiceStatus,
    SourceKind,
    UnifiedTransaction,
)
from clinicbooks.domain.errors import ValidationError
from clinicbooks.domain.periods import PeriodWindowEngine, bucket_ranges


def txn(date, amount, direction=Direction.INFLOW, id=None):
    return UnifiedTransaction(
        id=id or f"p-{date}-{amount}",
        original_id="1",
        source_kind=SourceKind.PAYMENT,
        date=date,
        sort_key=to_sort_key(date),
        description="",
        amount=Decimal(amount),
        direction=direction,
        category="Receipt",
        counterparty_name="",
    )


def test_window_includes_both_ends(today):
    """A 7-day window counts its first and last day and nothing beyond."""
    engine = PeriodWindowEngine(
        [
            txn("1403/06/25", "1"),  # one day before start
            txn("1403/06/26", "10"),  # start
            txn("1403/07/01", "100"),  # end
            txn("1403/07/02", "1000"),  # one day after end
        ]
    )

    window = engine.window(today, 7)

    assert window.start == "1403/06/26"
    assert window.end == "1403/07/01"
    assert window.total_inflow == Decimal("110")
    assert window.total_outflow == Decimal("0")


def test_window_offset_and_net(today):
    engine = PeriodWindowEngine(
        [
            txn("1403/06/24", "500"),
            txn("1403/06/20", "200", Direction.OUTFLOW),
            txn("1403/07/01", "999"),
        ]
    )

    window = engine.window(today, 7, offset_days=7)

    assert window.end == "1403/06/25"
    assert window.start == "1403/06/19"
    assert window.total_inflow == Decimal("500")
    assert window.total_outflow == Decimal("200")
    assert window.net == Decimal("300")


def test_empty_window_has_zero_totals(today):
    window = PeriodWindowEngine([]).window(today, 30)

    assert window.total_inflow == Decimal("0")
    assert window.total_outflow == Decimal("0")
    assert window.invoices_in_range == ()


def test_window_lists_invoices_in_range(today):
    invoices = [
        Invoice("A", "1403/06/01", InvoiceStatus.PAID, "x", Decimal("1"), Decimal("1")),
        Invoice("B", "1403/06/30", InvoiceStatus.PAID, "x", Decimal("1"), Decimal("1")),
    ]
    window = PeriodWindowEngine([], invoices).window(today, 7)

    assert [inv.id for inv in window.invoices_in_range] == ["B"]


def test_window_rejects_non_positive_length(today):
    with pytest.raises(ValidationError):
        PeriodWindowEngine([]).window(today, 0)


def test_window_accepts_text_base():
    window = PeriodWindowEngine([txn("1403/01/01", "5")]).day("1403/01/01")

    assert window.total_inflow == Decimal("5")


def test_comparisons_triples(today):
    engine = PeriodWindowEngine(
        [
            txn("1403/07/01", "10"),
            txn("1403/06/31", "20"),
            txn("1403/06/30", "40"),
        ]
    )

    comparisons = engine.comparisons(today)

    daily = comparisons["daily"]
    assert [w.label for w in daily] == ["Today", "Yesterday", "2 days ago"]
    assert [w.total_inflow for w in daily] == [Decimal("10"), Decimal("20"), Decimal("40")]
    assert [w.label for w in comparisons["weekly"]] == ["This week", "Last week", "2 weeks ago"]
    assert comparisons["weekly"][0].total_inflow == Decimal("70")
    assert comparisons["weekly"][1].total_inflow == Decimal("0")
    monthly = comparisons["monthly"]
    assert monthly[0].start == "1403/06/03"
    assert monthly[1].end == "1403/06/02"


def test_weekly_buckets_dense_with_empty_oldest(today):
    """Four weekly buckets come back even when the oldest one is empty."""
    engine = PeriodWindowEngine(
        [
            txn("1403/06/17", "1"),
            txn("1403/06/24", "2"),
            txn("1403/06/30", "3"),
            txn("1403/07/01", "4", Direction.OUTFLOW),
        ]
    )

    buckets = engine.buckets(today, 4, Granularity.WEEK)

    assert len(buckets) == 4
    assert [b.label for b in buckets] == ["06/10", "06/17", "06/24", "06/31"]
    assert buckets[0].inflow == Decimal("0")
    assert [b.inflow for b in buckets[1:]] == [Decimal("1"), Decimal("5"), Decimal("0")]
    assert buckets[3].outflow == Decimal("4")


def test_buckets_cover_span_without_overlap(today):
    ranges = bucket_ranges(today, 4, Granularity.WEEK)

    for (_, end), (next_start, _) in zip(ranges, ranges[1:]):
        assert next_start.sort_key > end.sort_key
        assert (next_start.to_gregorian() - end.to_gregorian()).days == 1
    assert ranges[-1][0] == CalendarDate(1403, 6, 31)
    assert ranges[-1][1] == CalendarDate(1403, 7, 6)


def test_daily_buckets(today):
    engine = PeriodWindowEngine([txn("1403/06/30", "7")])

    buckets = engine.buckets(today, 3, Granularity.DAY)

    assert [b.label for b in buckets] == ["06/30", "06/31", "07/01"]
    assert buckets[0].inflow == Decimal("7")


def test_monthly_buckets_follow_civil_months(today):
    engine = PeriodWindowEngine(
        [txn("1403/05/31", "1"), txn("1403/06/01", "2"), txn("1403/06/31", "4")]
    )

    buckets = engine.buckets(today, 3, Granularity.MONTH)

    assert [b.label for b in buckets] == ["1403/05", "1403/06", "1403/07"]
    assert [b.inflow for b in buckets] == [Decimal("1"), Decimal("6"), Decimal("0")]


def test_monthly_buckets_cross_year():
    buckets = PeriodWindowEngine([]).buckets(CalendarDate(1403, 2, 10), 3, Granularity.MONTH)

    assert [b.label for b in buckets] == ["1402/12", "1403/01", "1403/02"]


def test_buckets_reject_non_positive_count(today):
    with pytest.raises(ValidationError):
        PeriodWindowEngine([]).buckets(today, 0)
