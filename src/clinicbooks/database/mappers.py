"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes.
"""

from decimal import Decimal
from typing import Iterable, Optional

from clinicbooks.domain import entities as domain
from clinicbooks.database.models import (
    Account as ORMAccount,
    Contact as ORMContact,
    Due as ORMDue,
    Expense as ORMExpense,
    InventoryItem as ORMInventoryItem,
    Invoice as ORMInvoice,
    LedgerEntry as ORMLedgerEntry,
    Payment as ORMPayment,
    Payslip as ORMPayslip,
)

TAG_SEPARATOR = ","


def tags_to_column(tags: Iterable[str]) -> str:
    """Join tags for storage, dropping blanks."""
    return TAG_SEPARATOR.join(tag.strip() for tag in tags if tag and tag.strip())


def tags_to_domain(value: Optional[str]) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(tag for tag in value.split(TAG_SEPARATOR) if tag)


def _money(value) -> Decimal:
    return Decimal("0") if value is None else Decimal(value)


def account_to_domain(orm_account: ORMAccount) -> domain.AccountNode:
    """Convert SQLAlchemy Account model to domain AccountNode entity."""
    return domain.AccountNode(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        parent_id=orm_account.parent_id,
        main_type=domain.MainAccountType(orm_account.main_type),
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        account_id=orm_entry.account_id,
        debit=_money(orm_entry.debit),
        credit=_money(orm_entry.credit),
        description=orm_entry.description,
    )


def contact_to_domain(orm_contact: ORMContact) -> domain.Contact:
    return domain.Contact(id=orm_contact.id, name=orm_contact.name, kind=orm_contact.kind)


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        date=orm_payment.date,
        description=orm_payment.description,
        amount=_money(orm_payment.amount),
        kind=domain.PaymentKind(orm_payment.kind),
        entity_id=orm_payment.entity_id,
        account_id=orm_payment.account_id,
        method=orm_payment.method,
        invoice_id=orm_payment.invoice_id,
        tags=tags_to_domain(orm_payment.tags),
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        date=orm_expense.date,
        description=orm_expense.description,
        amount=_money(orm_expense.amount),
        expense_account_id=orm_expense.expense_account_id,
        from_account_id=orm_expense.from_account_id,
        to_entity_id=orm_expense.to_entity_id,
        tags=tags_to_domain(orm_expense.tags),
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    return domain.Invoice(
        id=orm_invoice.id,
        date=orm_invoice.date,
        status=domain.InvoiceStatus(orm_invoice.status),
        recipient_name=orm_invoice.recipient_name,
        patient_share=_money(orm_invoice.patient_share),
        paid_amount=_money(orm_invoice.paid_amount),
    )


def due_to_domain(orm_due: ORMDue) -> domain.PayableReceivable:
    """Convert SQLAlchemy Due model to domain PayableReceivable entity."""
    return domain.PayableReceivable(
        id=orm_due.id,
        type=domain.DueType(orm_due.type),
        status=domain.DueStatus(orm_due.status),
        amount=_money(orm_due.amount),
        due_date=orm_due.due_date,
        entity_id=orm_due.entity_id,
        description=orm_due.description,
    )


def inventory_item_to_domain(orm_item: ORMInventoryItem) -> domain.InventoryItem:
    return domain.InventoryItem(
        id=orm_item.id,
        name=orm_item.name,
        quantity=orm_item.quantity,
        reorder_point=orm_item.reorder_point,
    )


def payslip_to_domain(orm_payslip: ORMPayslip) -> domain.Payslip:
    return domain.Payslip(
        id=orm_payslip.id,
        employee_name=orm_payslip.employee_name,
        pay_period=orm_payslip.pay_period,
        status=domain.PayslipStatus(orm_payslip.status),
        net_payable=_money(orm_payslip.net_payable),
    )
