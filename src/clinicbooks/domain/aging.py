"""Invoice aging by days past the invoice date."""

import logging
from decimal import Decimal
from typing import Iterable

from clinicbooks.domain.calendar import BaseDate, as_civil, parse_civil
from clinicbooks.domain.entities import (
    AGING_BUCKET_LABELS,
    AgingRow,
    Invoice,
    InvoiceAging,
    InvoiceStatus,
)

logger = logging.getLogger(__name__)

# Inclusive upper bounds, in days, of every bucket but the last
AGING_LIMITS = (30, 60, 90)


def aging_bucket(days_past: int) -> int:
    """Index into ``AGING_BUCKET_LABELS`` for a number of days past."""
    for index, limit in enumerate(AGING_LIMITS):
        if days_past <= limit:
            return index
    return len(AGING_LIMITS)


def build_invoice_aging(invoices: Iterable[Invoice], today: BaseDate) -> InvoiceAging:
    """Unpaid invoice amounts per recipient, bucketed by age.

    The unpaid amount is ``patient_share - paid_amount``; paid invoices and
    invoices with nothing left to pay are skipped. Age is counted in whole
    days from the invoice date to ``today`` and never goes below zero. An
    invoice whose date does not parse is aged as the oldest.

    Args:
        invoices: Invoices to age
        today: Reference day

    Returns:
        InvoiceAging with one row per recipient, in first-seen order,
        and a totals row
    """
    today = as_civil(today)
    today_native = today.to_gregorian()
    oldest = len(AGING_LIMITS)

    amounts_by_name: dict[str, list[Decimal]] = {}
    for invoice in invoices:
        if invoice.status == InvoiceStatus.PAID:
            continue
        amount_due = invoice.patient_share - invoice.paid_amount
        if amount_due <= 0:
            continue

        issued = parse_civil(invoice.date)
        if issued is None:
            logger.warning(
                "Malformed date %r on invoice %s; aging it as oldest", invoice.date, invoice.id
            )
            bucket = oldest
        else:
            bucket = aging_bucket(max(0, (today_native - issued.to_gregorian()).days))

        amounts = amounts_by_name.setdefault(
            invoice.recipient_name, [Decimal("0")] * len(AGING_BUCKET_LABELS)
        )
        amounts[bucket] += amount_due

    rows = tuple(AgingRow(name, tuple(amounts)) for name, amounts in amounts_by_name.items())
    totals = AgingRow(
        "Total",
        tuple(
            sum((row.buckets[index] for row in rows), Decimal("0"))
            for index in range(len(AGING_BUCKET_LABELS))
        ),
    )
    return InvoiceAging(as_of=str(today), rows=rows, totals=totals)
