"""Alert evaluation over a snapshot of source records."""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from clinicbooks.domain.calendar import CalendarDate, shift_days, to_sort_key
from clinicbooks.domain.entities import (
    Alert,
    AlertCategory,
    AlertSettings,
    DueStatus,
    DueType,
    InventoryItem,
    Invoice,
    InvoiceStatus,
    PayableReceivable,
    Payslip,
    PayslipStatus,
    Severity,
    Snapshot,
)


def low_inventory_alerts(items: Iterable[InventoryItem]) -> list[Alert]:
    alerts = []
    for item in items:
        if item.quantity <= item.reorder_point:
            alerts.append(
                Alert(
                    message=f'Stock of "{item.name}" is low ({item.quantity} left).',
                    severity=Severity.DANGER if item.quantity == 0 else Severity.WARNING,
                    target_ref=f"inventory/{item.id}",
                    category=AlertCategory.LOW_INVENTORY,
                )
            )
    return alerts


def overdue_due_alerts(dues: Iterable[PayableReceivable], today: CalendarDate) -> list[Alert]:
    today_key = today.sort_key
    alerts = []
    for due in dues:
        if due.status == DueStatus.PENDING and to_sort_key(due.due_date) <= today_key:
            noun = "payable" if due.type == DueType.PAYABLE else "receivable"
            alerts.append(
                Alert(
                    message=f'The {noun} "{due.description}" is past due.',
                    severity=Severity.DANGER,
                    target_ref=f"dues/{due.id}",
                    category=AlertCategory.OVERDUE_DUES,
                )
            )
    return alerts


def pending_payslip_alerts(payslips: Iterable[Payslip]) -> list[Alert]:
    return [
        Alert(
            message=f"Payslip of {slip.employee_name} ({slip.pay_period}) is awaiting payment.",
            severity=Severity.WARNING,
            target_ref=f"payroll/{slip.id}",
            category=AlertCategory.PENDING_PAYSLIPS,
        )
        for slip in payslips
        if slip.status == PayslipStatus.AWAITING_PAYMENT
    ]


def overdue_invoice_alerts(
    invoices: Iterable[Invoice], today: CalendarDate, max_age_days: int = 30
) -> list[Alert]:
    cutoff_key = shift_days(today, -max_age_days).sort_key
    return [
        Alert(
            message=(
                f"Invoice {invoice.id} for {invoice.recipient_name} has been unpaid "
                f"for more than {max_age_days} days."
            ),
            severity=Severity.DANGER,
            target_ref=f"invoices/{invoice.id}",
            category=AlertCategory.OVERDUE_INVOICES,
        )
        for invoice in invoices
        if invoice.status != InvoiceStatus.PAID and to_sort_key(invoice.date) < cutoff_key
    ]


def evaluate_alerts(
    snapshot: Snapshot,
    today: CalendarDate,
    settings: Optional[AlertSettings] = None,
) -> list[Alert]:
    """Alerts for every enabled category.

    Categories are independent of each other; the order of the result only
    affects display.

    Args:
        snapshot: Source records to scan
        today: Civil date the evaluation is relative to
        settings: Category switches; defaults to the snapshot's settings

    Returns:
        List of alerts, grouped by category
    """
    settings = settings or snapshot.alert_settings
    alerts: list[Alert] = []
    if settings.low_inventory:
        alerts.extend(low_inventory_alerts(snapshot.inventory))
    if settings.upcoming_dues:
        alerts.extend(overdue_due_alerts(snapshot.dues, today))
    if settings.pending_payslips:
        alerts.extend(pending_payslip_alerts(snapshot.payslips))
    if settings.overdue_invoices:
        alerts.extend(
            overdue_invoice_alerts(snapshot.invoices, today, settings.overdue_invoice_days)
        )
    return alerts


def upcoming_dues(
    dues: Sequence[PayableReceivable], today: CalendarDate, days: int = 7
) -> list[PayableReceivable]:
    """Pending dues falling between today and ``days`` days ahead, soonest first."""
    start_key = today.sort_key
    end_key = shift_days(today, days).sort_key
    selected = [
        due
        for due in dues
        if due.status == DueStatus.PENDING and start_key <= to_sort_key(due.due_date) <= end_key
    ]
    return sorted(selected, key=lambda due: to_sort_key(due.due_date))


def outstanding_totals(dues: Iterable[PayableReceivable]) -> dict[DueType, Decimal]:
    """Sum of pending receivables and payables."""
    totals = {DueType.RECEIVABLE: Decimal("0"), DueType.PAYABLE: Decimal("0")}
    for due in dues:
        if due.status == DueStatus.PENDING:
            totals[due.type] += due.amount
    return totals
