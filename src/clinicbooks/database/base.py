"""Abstract database interface."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from clinicbooks.domain.entities import (
    AccountNode,
    AlertSettings,
    Contact,
    DueStatus,
    DueType,
    Expense,
    InventoryItem,
    Invoice,
    InvoiceStatus,
    LedgerEntry,
    MainAccountType,
    PayableReceivable,
    Payment,
    PaymentKind,
    Payslip,
    PayslipStatus,
    Snapshot,
)


class Database(ABC):
    """Abstract database interface for clinicbooks."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def get_version(self) -> int:
        """Counter bumped by every write."""
        pass

    # Chart of accounts
    @abstractmethod
    def create_account(
        self, code: str, name: str, main_type: MainAccountType, parent_id: Optional[int] = None
    ) -> int:
        """Create a chart-of-accounts node. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[AccountNode]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[AccountNode]:
        """Get account by its chart code."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[AccountNode]:
        """List all accounts ordered by code."""
        pass

    # Ledger
    @abstractmethod
    def create_ledger_entry(
        self,
        date: str,
        account_id: int,
        debit: Decimal,
        credit: Decimal,
        description: Optional[str] = None,
    ) -> int:
        """Post a ledger entry. Returns entry ID."""
        pass

    @abstractmethod
    def list_ledger_entries(self, account_id: Optional[int] = None) -> list[LedgerEntry]:
        """List ledger entries, optionally filtered by account."""
        pass

    # Contacts
    @abstractmethod
    def create_contact(self, contact_id: str, name: str, kind: str) -> str:
        """Create a contact under a composite id. Returns the id."""
        pass

    @abstractmethod
    def get_contact(self, contact_id: str) -> Optional[Contact]:
        """Get contact by composite id."""
        pass

    @abstractmethod
    def list_contacts(self, kind: Optional[str] = None) -> list[Contact]:
        """List contacts, optionally filtered by kind."""
        pass

    # Cash records
    @abstractmethod
    def create_payment(
        self,
        date: str,
        description: str,
        amount: Decimal,
        kind: PaymentKind,
        entity_id: str,
        account_id: int,
        method: Optional[str] = None,
        invoice_id: Optional[str] = None,
        tags: Sequence[str] = (),
    ) -> int:
        """Record a payment. Returns payment ID."""
        pass

    @abstractmethod
    def list_payments(self) -> list[Payment]:
        """List all payments."""
        pass

    @abstractmethod
    def create_expense(
        self,
        date: str,
        description: str,
        amount: Decimal,
        expense_account_id: int,
        from_account_id: int,
        to_entity_id: str,
        tags: Sequence[str] = (),
    ) -> int:
        """Record an expense. Returns expense ID."""
        pass

    @abstractmethod
    def list_expenses(self) -> list[Expense]:
        """List all expenses."""
        pass

    @abstractmethod
    def create_invoice(
        self,
        invoice_id: str,
        date: str,
        status: InvoiceStatus,
        recipient_name: str,
        patient_share: Decimal,
        paid_amount: Decimal,
    ) -> str:
        """Record an invoice. Returns the invoice id."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: str) -> Optional[Invoice]:
        """Get invoice by id."""
        pass

    @abstractmethod
    def list_invoices(self) -> list[Invoice]:
        """List all invoices."""
        pass

    # Payables and receivables
    @abstractmethod
    def create_due(
        self,
        type: DueType,
        amount: Decimal,
        due_date: str,
        entity_id: str,
        description: str,
        status: DueStatus = DueStatus.PENDING,
    ) -> int:
        """Record a payable or receivable. Returns its ID."""
        pass

    @abstractmethod
    def update_due_status(self, due_id: int, status: DueStatus) -> None:
        """Change the status of a payable or receivable."""
        pass

    @abstractmethod
    def list_dues(self) -> list[PayableReceivable]:
        """List all payables and receivables."""
        pass

    # Inventory and payroll
    @abstractmethod
    def create_inventory_item(self, name: str, quantity: int, reorder_point: int) -> int:
        """Create an inventory item. Returns item ID."""
        pass

    @abstractmethod
    def list_inventory_items(self) -> list[InventoryItem]:
        """List all inventory items."""
        pass

    @abstractmethod
    def create_payslip(
        self,
        employee_name: str,
        pay_period: str,
        status: PayslipStatus,
        net_payable: Decimal = Decimal("0"),
    ) -> int:
        """Create a payslip. Returns payslip ID."""
        pass

    @abstractmethod
    def list_payslips(self) -> list[Payslip]:
        """List all payslips."""
        pass

    # Settings
    @abstractmethod
    def get_alert_settings(self) -> AlertSettings:
        """Stored alert settings, defaults for anything never saved."""
        pass

    @abstractmethod
    def save_alert_settings(self, settings: AlertSettings) -> None:
        """Persist alert settings."""
        pass

    def load_snapshot(self) -> Snapshot:
        """Read every source record into an immutable snapshot."""
        return Snapshot(
            payments=tuple(self.list_payments()),
            expenses=tuple(self.list_expenses()),
            invoices=tuple(self.list_invoices()),
            dues=tuple(self.list_dues()),
            accounts=tuple(self.list_accounts()),
            ledger_entries=tuple(self.list_ledger_entries()),
            contacts=tuple(self.list_contacts()),
            inventory=tuple(self.list_inventory_items()),
            payslips=tuple(self.list_payslips()),
            alert_settings=self.get_alert_settings(),
            version=self.get_version(),
        )
