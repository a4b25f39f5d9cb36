"""Domain model entities for clinicbooks.

These are pure data classes representing business concepts, independent of
database schema. Source records mirror what the clinic's bookkeeping screens
hand over; derived views (unified transactions, windows, KPIs, alerts) are
recomputed from a snapshot of those records and never stored.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class PaymentKind(str, Enum):
    """Whether money came in or went out through a payment record."""

    RECEIPT = "receipt"
    DISBURSEMENT = "disbursement"


class Direction(str, Enum):
    """Cash direction of a unified transaction."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"


class SourceKind(str, Enum):
    """Record kind a unified transaction was projected from."""

    PAYMENT = "payment"
    EXPENSE = "expense"
    INVOICE = "invoice"


class MainAccountType(str, Enum):
    """Top-level classification of a chart-of-accounts node."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"


class InvoiceStatus(str, Enum):
    PAID = "paid"
    PARTIAL = "partial"
    AWAITING_PAYMENT = "awaiting payment"


class DueType(str, Enum):
    PAYABLE = "payable"
    RECEIVABLE = "receivable"


class DueStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PayslipStatus(str, Enum):
    AWAITING_PAYMENT = "awaiting payment"
    PAID = "paid"


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class Severity(str, Enum):
    WARNING = "warning"
    DANGER = "danger"


class AlertCategory(str, Enum):
    LOW_INVENTORY = "low_inventory"
    OVERDUE_DUES = "overdue_dues"
    PENDING_PAYSLIPS = "pending_payslips"
    OVERDUE_INVOICES = "overdue_invoices"


class Granularity(str, Enum):
    """Bucket size for dense time series."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class StatementDirection(str, Enum):
    """Direction of a bank statement line as seen by the bank."""

    CREDIT = "credit"
    DEBIT = "debit"


class StatementMode(str, Enum):
    """How a bank statement carries amounts."""

    SINGLE = "single"
    DOUBLE = "double"


class EventKind(str, Enum):
    """What a calendar event marks."""

    INCOME = "income"
    EXPENSE = "expense"
    PAYABLE_DUE = "payable due"
    RECEIVABLE_DUE = "receivable due"


# Source records


@dataclass(frozen=True)
class AccountNode:
    """Chart-of-accounts node. ``parent_id`` is None for roots."""

    id: int
    code: str
    name: str
    parent_id: Optional[int]
    main_type: MainAccountType


@dataclass(frozen=True)
class LedgerEntry:
    """Single ledger line posted against an account."""

    id: int
    date: str
    account_id: int
    debit: Decimal
    credit: Decimal
    description: Optional[str] = None


@dataclass(frozen=True)
class Contact:
    """Display entry keyed by a composite id such as ``patient-1``."""

    id: str
    name: str
    kind: str


@dataclass(frozen=True)
class Payment:
    """Incoming or outgoing payment."""

    id: int
    date: str
    description: str
    amount: Decimal
    kind: PaymentKind
    entity_id: str
    account_id: int
    method: Optional[str] = None
    invoice_id: Optional[str] = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Expense:
    """Expense booked against an expense account."""

    id: int
    date: str
    description: str
    amount: Decimal
    expense_account_id: int
    from_account_id: int
    to_entity_id: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Invoice:
    """Clinic invoice."""

    id: str
    date: str
    status: InvoiceStatus
    recipient_name: str
    patient_share: Decimal
    paid_amount: Decimal


@dataclass(frozen=True)
class PayableReceivable:
    """Money the clinic owes (payable) or is owed (receivable)."""

    id: int
    type: DueType
    status: DueStatus
    amount: Decimal
    due_date: str
    entity_id: str
    description: str


@dataclass(frozen=True)
class InventoryItem:
    id: int
    name: str
    quantity: int
    reorder_point: int


@dataclass(frozen=True)
class Payslip:
    id: int
    employee_name: str
    pay_period: str
    status: PayslipStatus
    net_payable: Decimal = Decimal("0")


@dataclass(frozen=True)
class AlertSettings:
    """Alert category switches and thresholds."""

    low_inventory: bool = True
    overdue_invoices: bool = True
    upcoming_dues: bool = True
    pending_payslips: bool = True
    overdue_invoice_days: int = 30
    upcoming_due_days: int = 7


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of every source record for one evaluation pass.

    ``version`` changes whenever the underlying store is written, so it can
    key a memo of derived results.
    """

    payments: tuple[Payment, ...] = ()
    expenses: tuple[Expense, ...] = ()
    invoices: tuple[Invoice, ...] = ()
    dues: tuple[PayableReceivable, ...] = ()
    accounts: tuple[AccountNode, ...] = ()
    ledger_entries: tuple[LedgerEntry, ...] = ()
    contacts: tuple[Contact, ...] = ()
    inventory: tuple[InventoryItem, ...] = ()
    payslips: tuple[Payslip, ...] = ()
    alert_settings: AlertSettings = field(default_factory=AlertSettings)
    version: int = 0


# Derived views


@dataclass(frozen=True)
class UnifiedTransaction:
    """Normalized cash record projected from a payment, expense or invoice.

    ``date`` is the canonical ``YYYY/MM/DD`` text when the source date parses
    and the raw text otherwise; ``sort_key`` is 0 for unparseable dates.
    """

    id: str
    original_id: str
    source_kind: SourceKind
    date: str
    sort_key: int
    description: str
    amount: Decimal
    direction: Direction
    category: str
    counterparty_name: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class PeriodWindow:
    """Closed civil-date range with aggregated totals."""

    label: str
    start: str
    end: str
    start_key: int
    end_key: int
    total_inflow: Decimal
    total_outflow: Decimal
    invoices_in_range: tuple[Invoice, ...] = ()

    @property
    def net(self) -> Decimal:
        return self.total_inflow - self.total_outflow


@dataclass(frozen=True)
class TimeBucket:
    """One entry of a dense time series."""

    label: str
    start_key: int
    end_key: int
    inflow: Decimal
    outflow: Decimal


@dataclass(frozen=True)
class Trend:
    direction: TrendDirection
    percent: Optional[int]
    text: str


@dataclass(frozen=True)
class KPI:
    """Key performance indicator compared against the previous period."""

    title: str
    value: Decimal
    previous_value: Decimal
    trend: Trend
    higher_is_better: bool = True

    @property
    def favorable(self) -> Optional[bool]:
        """True when the trend moves the good way, None when neutral."""
        if self.trend.direction == TrendDirection.NEUTRAL:
            return None
        went_up = self.trend.direction == TrendDirection.UP
        return went_up if self.higher_is_better else not went_up


@dataclass(frozen=True)
class Alert:
    message: str
    severity: Severity
    target_ref: str
    category: AlertCategory


@dataclass(frozen=True)
class AccountBalance:
    """Rolled-up balance of one account for reports."""

    account: AccountNode
    balance: Decimal
    has_children: bool


@dataclass(frozen=True)
class BalanceSheet:
    as_of: str
    assets: tuple[AccountBalance, ...]
    liabilities: tuple[AccountBalance, ...]
    equity: tuple[AccountBalance, ...]
    retained_earnings: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal

    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return self.total_liabilities + self.total_equity


@dataclass(frozen=True)
class ProfitAndLoss:
    """Income and expense totals over a closed civil-date range."""

    start: str
    end: str
    total_income: Decimal
    total_expense: Decimal

    @property
    def net_profit(self) -> Decimal:
        return self.total_income - self.total_expense


# Days past the invoice date: up to 30, 60, 90, then older.
AGING_BUCKET_LABELS = ("0-30", "31-60", "61-90", ">90")


@dataclass(frozen=True)
class AgingRow:
    """Unpaid invoice amounts of one recipient, per aging bucket."""

    name: str
    buckets: tuple[Decimal, Decimal, Decimal, Decimal]

    @property
    def total(self) -> Decimal:
        return sum(self.buckets, Decimal("0"))


@dataclass(frozen=True)
class InvoiceAging:
    as_of: str
    rows: tuple[AgingRow, ...]
    totals: AgingRow


@dataclass(frozen=True)
class CalendarEvent:
    """Dated marker for a calendar view, keyed by the Gregorian date.

    ``amount`` is signed for cash events (negative for expenses) and the
    due amount for pending dues.
    """

    gregorian_date: date
    civil_date: str
    title: str
    kind: EventKind
    amount: Decimal


@dataclass(frozen=True)
class StatementLine:
    """Bank statement row read for reconciliation.

    ``ambiguous`` marks zero-amount rows whose direction cannot be inferred.
    """

    row_number: int
    date: str
    description: str
    amount: Decimal
    direction: StatementDirection
    ambiguous: bool = False


@dataclass(frozen=True)
class ColumnMapping:
    """Bank statement header names for each field, None when absent."""

    date: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[str] = None
    debit: Optional[str] = None
    credit: Optional[str] = None
    mode: StatementMode = StatementMode.SINGLE
