"""Dashboard domain service."""

import logging
from decimal import Decimal
from typing import Optional

from clinicbooks.database.base import Database
from clinicbooks.domain.account_tree import (
    AccountTree,
    build_balance_sheet,
    build_profit_and_loss,
    ledger_balances,
)
from clinicbooks.domain.aging import build_invoice_aging
from clinicbooks.domain.alerts import evaluate_alerts, outstanding_totals, upcoming_dues
from clinicbooks.domain.calendar import BaseDate, CalendarDate, as_civil, civil_today
from clinicbooks.domain.calendar_events import calendar_events
from clinicbooks.domain.entities import (
    KPI,
    Alert,
    BalanceSheet,
    CalendarEvent,
    DueType,
    Granularity,
    InvoiceAging,
    PayableReceivable,
    PeriodWindow,
    ProfitAndLoss,
    Snapshot,
    TimeBucket,
    UnifiedTransaction,
)
from clinicbooks.domain.kpi import financial_health
from clinicbooks.domain.periods import PeriodWindowEngine
from clinicbooks.domain.unifier import unify_transactions

logger = logging.getLogger(__name__)

KPI_WINDOW_DAYS = 30


class DashboardService:
    """Derived dashboard views over the stored records.

    Every view is recomputed from a snapshot. The unified projection of
    the stored records is memoized per snapshot version, so repeated views
    of unchanged data share one projection.
    """

    def __init__(self, db: Database, today: Optional[CalendarDate] = None):
        """Initialize dashboard service.

        Args:
            db: Database instance
            today: Reference day; defaults to the current civil day
        """
        self.db = db
        self.today = today or civil_today()
        self._memo_version: Optional[int] = None
        self._memo: dict[bool, list[UnifiedTransaction]] = {}

    def _base(self, base_date: Optional[BaseDate]) -> CalendarDate:
        return self.today if base_date is None else as_civil(base_date)

    def snapshot(self) -> Snapshot:
        return self.db.load_snapshot()

    def _project(
        self, snapshot: Snapshot, include_disbursements: bool
    ) -> list[UnifiedTransaction]:
        return unify_transactions(
            snapshot.payments,
            snapshot.expenses,
            snapshot.invoices,
            snapshot.accounts,
            snapshot.contacts,
            include_disbursements=include_disbursements,
        )

    def _stored_projection(
        self, snapshot: Snapshot, include_disbursements: bool
    ) -> list[UnifiedTransaction]:
        # Only snapshots loaded from the store carry a meaningful version
        if snapshot.version != self._memo_version:
            self._memo_version = snapshot.version
            self._memo = {}
        if include_disbursements not in self._memo:
            logger.debug("Projecting snapshot version %s", snapshot.version)
            self._memo[include_disbursements] = self._project(snapshot, include_disbursements)
        return self._memo[include_disbursements]

    def unified_transactions(
        self, snapshot: Optional[Snapshot] = None, include_disbursements: bool = True
    ) -> list[UnifiedTransaction]:
        """Unified transactions of a snapshot, newest first.

        Args:
            snapshot: Snapshot to project; loaded from the database when
                omitted. Only the loaded snapshot's projection is memoized.
            include_disbursements: If False, outgoing payments are left out

        Returns:
            List of unified transactions
        """
        if snapshot is not None:
            return self._project(snapshot, include_disbursements)
        return self._stored_projection(self.snapshot(), include_disbursements)

    def engine(self, snapshot: Optional[Snapshot] = None) -> PeriodWindowEngine:
        if snapshot is None:
            snapshot = self.snapshot()
            transactions = self._stored_projection(snapshot, True)
        else:
            transactions = self._project(snapshot, True)
        return PeriodWindowEngine(transactions, snapshot.invoices)

    def comparisons(self, base_date: Optional[BaseDate] = None) -> dict[str, list[PeriodWindow]]:
        """Daily, weekly and monthly comparison windows ending at base."""
        return self.engine().comparisons(self._base(base_date))

    def series(
        self,
        count: int,
        granularity: Granularity = Granularity.WEEK,
        base_date: Optional[BaseDate] = None,
    ) -> list[TimeBucket]:
        """Dense inflow/outflow series, oldest bucket first."""
        return self.engine().buckets(self._base(base_date), count, granularity)

    def kpis(self, base_date: Optional[BaseDate] = None) -> list[KPI]:
        """Financial health KPIs of the last 30 days against the 30 before."""
        engine = self.engine()
        base = self._base(base_date)
        current = engine.window(base, KPI_WINDOW_DAYS, 0, "This month")
        previous = engine.window(base, KPI_WINDOW_DAYS, KPI_WINDOW_DAYS, "Last month")
        return financial_health(current, previous)

    def alerts(self, today: Optional[BaseDate] = None) -> list[Alert]:
        snapshot = self.snapshot()
        return evaluate_alerts(snapshot, self._base(today))

    def upcoming_dues(self, today: Optional[BaseDate] = None) -> list[PayableReceivable]:
        """Pending dues falling within the configured number of days."""
        snapshot = self.snapshot()
        return upcoming_dues(
            snapshot.dues, self._base(today), snapshot.alert_settings.upcoming_due_days
        )

    def outstanding_totals(self) -> dict[DueType, Decimal]:
        return outstanding_totals(self.snapshot().dues)

    def rolled_up_balances(self) -> dict[int, Decimal]:
        """Own plus descendant ``debit - credit`` balance of every account."""
        snapshot = self.snapshot()
        tree = AccountTree(snapshot.accounts)
        return tree.rolled_up_balances(ledger_balances(snapshot.ledger_entries))

    def balance_sheet(self, as_of: Optional[BaseDate] = None) -> BalanceSheet:
        snapshot = self.snapshot()
        return build_balance_sheet(
            snapshot.accounts, snapshot.ledger_entries, str(self._base(as_of))
        )

    def profit_and_loss(self, start: BaseDate, end: BaseDate) -> ProfitAndLoss:
        """Income and expenses posted between two civil dates, inclusive."""
        snapshot = self.snapshot()
        return build_profit_and_loss(
            snapshot.accounts,
            snapshot.ledger_entries,
            str(as_civil(start)),
            str(as_civil(end)),
        )

    def invoice_aging(self, today: Optional[BaseDate] = None) -> InvoiceAging:
        return build_invoice_aging(self.snapshot().invoices, self._base(today))

    def calendar_events(
        self, start: Optional[BaseDate] = None, end: Optional[BaseDate] = None
    ) -> list[CalendarEvent]:
        """Receipt, expense and pending-due events between two civil dates."""
        return calendar_events(
            self.snapshot(),
            None if start is None else as_civil(start),
            None if end is None else as_civil(end),
        )
