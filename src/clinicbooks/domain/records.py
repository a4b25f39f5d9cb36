"""Recording of cash, invoice, due, inventory and payroll records."""

from decimal import Decimal
from typing import Optional, Sequence

from clinicbooks.database.base import Database
from clinicbooks.domain.calendar import BaseDate, as_civil
from clinicbooks.domain.entities import (
    DueStatus,
    DueType,
    InvoiceStatus,
    MainAccountType,
    PaymentKind,
    PayslipStatus,
)
from clinicbooks.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    contact_not_found,
    invoice_id_taken,
)


def _require_positive(name: str, value: Decimal) -> None:
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")


def invoice_status_for(patient_share: Decimal, paid_amount: Decimal) -> InvoiceStatus:
    """Status implied by how much of the patient share is paid."""
    if paid_amount >= patient_share:
        return InvoiceStatus.PAID
    if paid_amount > 0:
        return InvoiceStatus.PARTIAL
    return InvoiceStatus.AWAITING_PAYMENT


class RecordService:
    """Service for recording source records that feed the dashboard."""

    def __init__(self, db: Database):
        """Initialize record service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_account(self, account_id: int):
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _require_contact(self, contact_id: str) -> None:
        if self.db.get_contact(contact_id) is None:
            raise NotFoundError(contact_not_found(contact_id))

    def add_payment(
        self,
        date: BaseDate,
        amount: Decimal,
        kind: PaymentKind,
        entity_id: str,
        account_id: int,
        description: str = "",
        method: Optional[str] = None,
        invoice_id: Optional[str] = None,
        tags: Sequence[str] = (),
    ) -> int:
        """Record a receipt or disbursement.

        Args:
            date: Civil date of the payment
            amount: Positive amount
            kind: Receipt or disbursement
            entity_id: Composite contact id of the counterparty
            account_id: Cash or bank account the money moved through
            description: Free text
            method: Payment method (cash, card, transfer, ...)
            invoice_id: Invoice this payment settles, if any
            tags: Free-form labels

        Returns:
            Payment ID

        Raises:
            ValidationError: If the date or amount is invalid
            NotFoundError: If the account, contact or invoice doesn't exist
        """
        civil = as_civil(date)
        _require_positive("Amount", amount)
        self._require_account(account_id)
        self._require_contact(entity_id)
        if invoice_id is not None and self.db.get_invoice(invoice_id) is None:
            raise NotFoundError(f"Invoice '{invoice_id}' not found")

        return self.db.create_payment(
            date=str(civil),
            description=description,
            amount=amount,
            kind=PaymentKind(kind),
            entity_id=entity_id,
            account_id=account_id,
            method=method,
            invoice_id=invoice_id,
            tags=tags,
        )

    def add_expense(
        self,
        date: BaseDate,
        amount: Decimal,
        expense_account_id: int,
        from_account_id: int,
        to_entity_id: str,
        description: str = "",
        tags: Sequence[str] = (),
    ) -> int:
        """Record an expense booked against an expense account.

        Raises:
            ValidationError: If the date or amount is invalid, or the
                expense account is not of the expense type
            NotFoundError: If an account or the contact doesn't exist
        """
        civil = as_civil(date)
        _require_positive("Amount", amount)
        expense_account = self._require_account(expense_account_id)
        if expense_account.main_type != MainAccountType.EXPENSE:
            raise ValidationError(
                f"Account '{expense_account.code}' is not an expense account"
            )
        self._require_account(from_account_id)
        self._require_contact(to_entity_id)

        return self.db.create_expense(
            date=str(civil),
            description=description,
            amount=amount,
            expense_account_id=expense_account_id,
            from_account_id=from_account_id,
            to_entity_id=to_entity_id,
            tags=tags,
        )

    def add_invoice(
        self,
        date: BaseDate,
        recipient_name: str,
        patient_share: Decimal,
        paid_amount: Decimal = Decimal("0"),
        invoice_id: Optional[str] = None,
        status: Optional[InvoiceStatus] = None,
    ) -> str:
        """Record an invoice.

        The status follows from the paid amount unless given.

        Returns:
            Invoice id

        Raises:
            ValidationError: If the date or amounts are invalid
            ConflictError: If the invoice id already exists
        """
        civil = as_civil(date)
        _require_positive("Patient share", patient_share)
        if paid_amount < 0 or paid_amount > patient_share:
            raise ValidationError(
                f"Paid amount must be between 0 and {patient_share}, got {paid_amount}"
            )
        if invoice_id is None:
            invoice_id = f"INV-{len(self.db.list_invoices()) + 1:04d}"
        if self.db.get_invoice(invoice_id) is not None:
            raise ConflictError(invoice_id_taken(invoice_id))

        return self.db.create_invoice(
            invoice_id=invoice_id,
            date=str(civil),
            status=InvoiceStatus(status) if status else invoice_status_for(patient_share, paid_amount),
            recipient_name=recipient_name,
            patient_share=patient_share,
            paid_amount=paid_amount,
        )

    def add_due(
        self,
        type: DueType,
        amount: Decimal,
        due_date: BaseDate,
        entity_id: str,
        description: str = "",
    ) -> int:
        """Record a pending payable or receivable.

        Raises:
            ValidationError: If the date or amount is invalid
            NotFoundError: If the contact doesn't exist
        """
        civil = as_civil(due_date)
        _require_positive("Amount", amount)
        self._require_contact(entity_id)
        return self.db.create_due(
            type=DueType(type),
            amount=amount,
            due_date=str(civil),
            entity_id=entity_id,
            description=description,
        )

    def settle_due(self, due_id: int) -> None:
        """Mark a payable or receivable as paid."""
        self.db.update_due_status(due_id, DueStatus.PAID)

    def add_inventory_item(self, name: str, quantity: int, reorder_point: int) -> int:
        if quantity < 0 or reorder_point < 0:
            raise ValidationError("Quantity and reorder point cannot be negative")
        return self.db.create_inventory_item(
            name=name, quantity=quantity, reorder_point=reorder_point
        )

    def add_payslip(
        self,
        employee_name: str,
        pay_period: str,
        net_payable: Decimal = Decimal("0"),
        status: PayslipStatus = PayslipStatus.AWAITING_PAYMENT,
    ) -> int:
        if net_payable < 0:
            raise ValidationError("Net payable cannot be negative")
        return self.db.create_payslip(
            employee_name=employee_name,
            pay_period=pay_period,
            status=PayslipStatus(status),
            net_payable=net_payable,
        )
