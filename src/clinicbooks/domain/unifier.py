"""Projection of payments, expenses and invoices into unified transactions."""

import logging
from typing import Iterable, Sequence

from clinicbooks.domain.calendar import EPOCH_ZERO, normalize_civil, to_sort_key
from clinicbooks.domain.entities import (
    AccountNode,
    Contact,
    Direction,
    Expense,
    Invoice,
    Payment,
    PaymentKind,
    SourceKind,
    UnifiedTransaction,
)

logger = logging.getLogger(__name__)

RECEIPT_CATEGORY = "Receipt"
DISBURSEMENT_CATEGORY = "Payment"
GENERIC_EXPENSE_CATEGORY = "Expense"
INVOICE_CATEGORY = "Invoice"


def resolve_counterparty(entity_id: str, contact_names: dict[str, str]) -> str:
    """Display name for a contact id; the raw id when it is unknown."""
    return contact_names.get(entity_id, entity_id)


def _civil_fields(raw_date: str, record_ref: str) -> tuple[str, int]:
    key = to_sort_key(raw_date)
    if key == EPOCH_ZERO:
        logger.warning("Malformed date %r on %s; treating it as oldest", raw_date, record_ref)
    return normalize_civil(raw_date), key


def project_payment(payment: Payment, contact_names: dict[str, str]) -> UnifiedTransaction:
    date_text, key = _civil_fields(payment.date, f"payment {payment.id}")
    if payment.kind == PaymentKind.RECEIPT:
        direction = Direction.INFLOW
        category = RECEIPT_CATEGORY
    else:
        direction = Direction.OUTFLOW
        category = (
            f"{DISBURSEMENT_CATEGORY}: {payment.method}"
            if payment.method
            else DISBURSEMENT_CATEGORY
        )
    return UnifiedTransaction(
        id=f"p-{payment.id}",
        original_id=str(payment.id),
        source_kind=SourceKind.PAYMENT,
        date=date_text,
        sort_key=key,
        description=payment.description,
        amount=abs(payment.amount),
        direction=direction,
        category=category,
        counterparty_name=resolve_counterparty(payment.entity_id, contact_names),
        tags=tuple(payment.tags),
    )


def project_expense(
    expense: Expense,
    account_names: dict[int, str],
    contact_names: dict[str, str],
) -> UnifiedTransaction:
    date_text, key = _civil_fields(expense.date, f"expense {expense.id}")
    return UnifiedTransaction(
        id=f"e-{expense.id}",
        original_id=str(expense.id),
        source_kind=SourceKind.EXPENSE,
        date=date_text,
        sort_key=key,
        description=expense.description,
        amount=abs(expense.amount),
        direction=Direction.OUTFLOW,
        category=account_names.get(expense.expense_account_id, GENERIC_EXPENSE_CATEGORY),
        counterparty_name=resolve_counterparty(expense.to_entity_id, contact_names),
        tags=tuple(expense.tags),
    )


def project_invoice(invoice: Invoice) -> UnifiedTransaction:
    date_text, key = _civil_fields(invoice.date, f"invoice {invoice.id}")
    return UnifiedTransaction(
        id=f"i-{invoice.id}",
        original_id=invoice.id,
        source_kind=SourceKind.INVOICE,
        date=date_text,
        sort_key=key,
        description=f"Invoice {invoice.id}",
        amount=abs(invoice.paid_amount),
        direction=Direction.INFLOW,
        category=INVOICE_CATEGORY,
        counterparty_name=invoice.recipient_name,
    )


def unify_transactions(
    payments: Sequence[Payment],
    expenses: Sequence[Expense],
    invoices: Sequence[Invoice] = (),
    accounts: Iterable[AccountNode] = (),
    contacts: Iterable[Contact] = (),
    include_disbursements: bool = True,
) -> list[UnifiedTransaction]:
    """Project source records into one list, newest first.

    Invoices only contribute their paid amount when no payment settles them
    through ``invoice_id``, so the same cash is never counted twice. Equal
    sort keys keep input order (payments, then expenses, then invoices).

    Args:
        payments: Payment records
        expenses: Expense records
        invoices: Invoice records
        accounts: Chart of accounts used to name expense categories
        contacts: Contacts used to name counterparties
        include_disbursements: If False, outgoing payments are left out

    Returns:
        Unified transactions sorted descending by sort key
    """
    account_names = {account.id: account.name for account in accounts}
    contact_names = {contact.id: contact.name for contact in contacts}

    result: list[UnifiedTransaction] = []
    for payment in payments:
        if payment.kind == PaymentKind.DISBURSEMENT and not include_disbursements:
            continue
        result.append(project_payment(payment, contact_names))

    for expense in expenses:
        result.append(project_expense(expense, account_names, contact_names))

    settled_invoice_ids = {p.invoice_id for p in payments if p.invoice_id}
    for invoice in invoices:
        if invoice.paid_amount > 0 and invoice.id not in settled_invoice_ids:
            result.append(project_invoice(invoice))

    result.sort(key=lambda txn: txn.sort_key, reverse=True)
    return result
