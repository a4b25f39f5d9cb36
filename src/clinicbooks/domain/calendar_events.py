"""Calendar events keyed by Gregorian date.

Receipts, expenses and pending dues become dated markers for a month
view. Calendar widgets work on Gregorian dates, so each civil date is
converted on the way out.
"""

import logging
from decimal import Decimal
from typing import Optional

from clinicbooks.domain.calendar import CalendarDate, parse_civil
from clinicbooks.domain.entities import (
    CalendarEvent,
    DueStatus,
    DueType,
    EventKind,
    PaymentKind,
    Snapshot,
)

logger = logging.getLogger(__name__)


def calendar_events(
    snapshot: Snapshot,
    start: Optional[CalendarDate] = None,
    end: Optional[CalendarDate] = None,
) -> list[CalendarEvent]:
    """Events of a snapshot in Gregorian date order.

    Receipts give ``+amount`` events and expenses ``-amount`` events.
    Outgoing payments are not shown. Pending dues give a ``Due:`` event
    whose kind tells payables from receivables. Records whose date does not
    parse as a civil date are skipped.

    Args:
        snapshot: Records to draw events from
        start: Earliest civil date to include
        end: Latest civil date to include

    Returns:
        List of CalendarEvent, same-day events in record order
    """
    events: list[CalendarEvent] = []

    def add(text: str, source: str, title: str, kind: EventKind, amount: Decimal) -> None:
        civil = parse_civil(text)
        if civil is None:
            logger.warning("Malformed date %r on %s; no calendar event", text, source)
            return
        if start is not None and civil < start:
            return
        if end is not None and civil > end:
            return
        events.append(
            CalendarEvent(
                gregorian_date=civil.to_gregorian(),
                civil_date=str(civil),
                title=title,
                kind=kind,
                amount=amount,
            )
        )

    for payment in snapshot.payments:
        if payment.kind == PaymentKind.RECEIPT:
            add(
                payment.date, f"payment {payment.id}",
                f"+{payment.amount:,.2f}", EventKind.INCOME, payment.amount,
            )

    for expense in snapshot.expenses:
        add(
            expense.date, f"expense {expense.id}",
            f"-{expense.amount:,.2f}", EventKind.EXPENSE, -expense.amount,
        )

    for due in snapshot.dues:
        if due.status != DueStatus.PENDING:
            continue
        kind = EventKind.PAYABLE_DUE if due.type == DueType.PAYABLE else EventKind.RECEIVABLE_DUE
        add(due.due_date, f"due {due.id}", f"Due: {due.description}", kind, due.amount)

    events.sort(key=lambda event: event.gregorian_date)
    return events
