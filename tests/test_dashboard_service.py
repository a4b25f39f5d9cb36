"""Tests for the dashboard service over a real database."""

import pytest
from decimal import Decimal

from clinicbooks.domain.dashboard import DashboardService
from clinicbooks.domain.entities import (
    DueStatus,
    DueType,
    EventKind,
    Granularity,
    PayableReceivable,
    Payment,
    PaymentKind,
    Snapshot,
    TrendDirection,
)
from clinicbooks.domain.settings import SettingsService


@pytest.fixture
def dashboard(temp_db, today):
    return DashboardService(temp_db, today=today)


@pytest.fixture
def recorded(record_service, sample_chart, sample_contacts):
    """A week of clinic activity around 1403/07/01."""
    patient, supplier = sample_contacts["patient"], sample_contacts["supplier"]
    record_service.add_payment(
        "1403/07/01", Decimal("1500000"), PaymentKind.RECEIPT, patient, sample_chart["11"]
    )
    record_service.add_payment(
        "1403/06/28", Decimal("400000"), PaymentKind.DISBURSEMENT, supplier, sample_chart["11"]
    )
    record_service.add_expense(
        "1403/06/31", Decimal("900000"), sample_chart["51"], sample_chart["11"], supplier
    )
    record_service.add_invoice(
        "1403/06/30", "Ali Rezaei", Decimal("2000000"), paid_amount=Decimal("2000000")
    )
    return sample_chart


def test_unified_transactions(dashboard, recorded):
    ids = [txn.id for txn in dashboard.unified_transactions()]

    assert ids == ["p-1", "e-1", "i-INV-0001", "p-2"]
    assert "p-2" not in [
        txn.id for txn in dashboard.unified_transactions(include_disbursements=False)
    ]


def test_projection_reused_until_data_changes(dashboard, recorded, record_service):
    first = dashboard.unified_transactions()

    assert dashboard.unified_transactions() is first

    record_service.add_inventory_item("Masks", 50, 10)
    second = dashboard.unified_transactions()

    assert second is not first
    assert second == first


def test_comparisons(dashboard, recorded):
    comparisons = dashboard.comparisons()

    today, yesterday, _ = comparisons["daily"]
    assert today.total_inflow == Decimal("1500000")
    assert yesterday.total_outflow == Decimal("900000")
    assert comparisons["weekly"][0].net == Decimal("2200000")


def test_weekly_series(dashboard, recorded):
    buckets = dashboard.series(4)

    assert [bucket.label for bucket in buckets] == ["06/10", "06/17", "06/24", "06/31"]
    assert (buckets[2].inflow, buckets[2].outflow) == (Decimal("2000000"), Decimal("400000"))
    assert (buckets[3].inflow, buckets[3].outflow) == (Decimal("1500000"), Decimal("900000"))
    assert buckets[0].inflow == Decimal("0")


def test_daily_series_with_base_date(dashboard, recorded):
    buckets = dashboard.series(2, Granularity.DAY, base_date="1403/06/31")

    assert [bucket.outflow for bucket in buckets] == [Decimal("0"), Decimal("900000")]


def test_kpis(dashboard, recorded):
    kpis = {item.title: item for item in dashboard.kpis()}

    assert kpis["Total expenses"].value == Decimal("1300000")
    assert kpis["Total expenses"].trend.direction == TrendDirection.UP
    assert kpis["Total expenses"].favorable is False
    assert kpis["Average revenue per invoice"].value == Decimal("3500000")


def test_alerts_follow_settings(dashboard, record_service, temp_db):
    record_service.add_inventory_item("Gloves", 0, 10)

    assert [alert.target_ref for alert in dashboard.alerts()] == ["inventory/1"]

    SettingsService(temp_db).update_alert_settings(low_inventory=False)

    assert dashboard.alerts() == []


def test_upcoming_dues_use_configured_days(dashboard, record_service, sample_contacts, temp_db):
    supplier = sample_contacts["supplier"]
    record_service.add_due(DueType.PAYABLE, Decimal("100"), "1403/07/05", supplier)
    record_service.add_due(DueType.RECEIVABLE, Decimal("300"), "1403/07/20", supplier)

    assert [due.due_date for due in dashboard.upcoming_dues()] == ["1403/07/05"]

    SettingsService(temp_db).update_alert_settings(upcoming_due_days=30)

    assert len(dashboard.upcoming_dues()) == 2
    assert dashboard.outstanding_totals() == {
        DueType.RECEIVABLE: Decimal("300"),
        DueType.PAYABLE: Decimal("100"),
    }


def test_balance_sheet_and_rollups(dashboard, account_service, sample_chart):
    account_service.post_entry("1403/01/01", sample_chart["11"], debit=Decimal("1000"))
    account_service.post_entry("1403/01/01", sample_chart["3"], credit=Decimal("1000"))
    account_service.post_entry("1403/02/01", sample_chart["51"], debit=Decimal("200"))
    account_service.post_entry("1403/02/01", sample_chart["12"], credit=Decimal("200"))

    sheet = dashboard.balance_sheet()

    assert sheet.total_assets == Decimal("800")
    assert sheet.retained_earnings == Decimal("-200")
    assert sheet.total_assets == sheet.total_liabilities_and_equity
    assert dashboard.balance_sheet("1403/01/15").retained_earnings == Decimal("0")

    balances = dashboard.rolled_up_balances()
    assert balances[sample_chart["1"]] == Decimal("800")
    assert balances[sample_chart["5"]] == Decimal("200")


def _visit(amount):
    return Snapshot(
        payments=(
            Payment(1, "1403/07/01", "Visit", Decimal(amount), PaymentKind.RECEIPT, "patient-1", 1),
        )
    )


def test_explicit_snapshots_with_same_version_are_not_shared(dashboard):
    first, second = _visit("100"), _visit("999")
    assert first.version == second.version

    assert dashboard.unified_transactions(first)[0].amount == Decimal("100")
    assert dashboard.unified_transactions(second)[0].amount == Decimal("999")
    assert dashboard.engine(second).window("1403/07/01", 1, 0).total_inflow == Decimal("999")


def test_explicit_snapshot_leaves_stored_projection_alone(dashboard, recorded):
    stored = dashboard.unified_transactions()

    dashboard.unified_transactions(_visit("5"))

    assert dashboard.unified_transactions() is stored


def test_outstanding_totals_read_the_snapshot(dashboard, monkeypatch):
    dues = (
        PayableReceivable(1, DueType.PAYABLE, DueStatus.PENDING, Decimal("70"), "1403/07/03", "supplier-1", ""),
        PayableReceivable(2, DueType.RECEIVABLE, DueStatus.PAID, Decimal("20"), "1403/07/03", "patient-1", ""),
    )
    monkeypatch.setattr(dashboard, "snapshot", lambda: Snapshot(dues=dues))

    assert dashboard.outstanding_totals() == {
        DueType.RECEIVABLE: Decimal("0"),
        DueType.PAYABLE: Decimal("70"),
    }


def test_profit_and_loss(dashboard, account_service, sample_chart):
    income = account_service.create_account("41", "Visits", parent_id=sample_chart["4"])
    account_service.post_entry("1403/06/10", income, credit=Decimal("5000"))
    account_service.post_entry("1403/06/10", sample_chart["11"], debit=Decimal("5000"))
    account_service.post_entry("1403/06/20", sample_chart["51"], debit=Decimal("1200"))
    account_service.post_entry("1403/07/02", sample_chart["51"], debit=Decimal("800"))

    report = dashboard.profit_and_loss("1403/06/10", "1403/07/01")

    assert (report.start, report.end) == ("1403/06/10", "1403/07/01")
    assert report.total_income == Decimal("5000")
    assert report.total_expense == Decimal("1200")
    assert report.net_profit == Decimal("3800")


def test_invoice_aging(dashboard, record_service):
    record_service.add_invoice("1403/06/01", "Sara Ahmadi", Decimal("3000"))
    record_service.add_invoice("1403/06/30", "Sara Ahmadi", Decimal("500"), paid_amount=Decimal("200"))
    record_service.add_invoice("1403/06/30", "Ali Rezaei", Decimal("900"), paid_amount=Decimal("900"))

    aging = dashboard.invoice_aging()

    assert aging.as_of == "1403/07/01"
    assert [row.name for row in aging.rows] == ["Sara Ahmadi"]
    assert aging.rows[0].buckets == (Decimal("300"), Decimal("3000"), Decimal("0"), Decimal("0"))
    assert aging.totals.total == Decimal("3300")


def test_calendar_events(dashboard, recorded, record_service, sample_contacts):
    record_service.add_due(DueType.RECEIVABLE, Decimal("300"), "1403/07/05", sample_contacts["patient"], "Insurance claim")

    events = dashboard.calendar_events("1403/06/28", "1403/07/10")

    assert [(event.civil_date, event.kind) for event in events] == [
        ("1403/06/31", EventKind.EXPENSE),
        ("1403/07/01", EventKind.INCOME),
        ("1403/07/05", EventKind.RECEIVABLE_DUE),
    ]
    assert events[2].title == "Due: Insurance claim"
