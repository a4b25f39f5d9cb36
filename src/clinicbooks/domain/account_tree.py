"""Chart-of-accounts tree and balance rollups."""

import logging
from decimal import Decimal
from typing import Callable, Iterable, Iterator, Mapping, Optional, Sequence, Union

from clinicbooks.domain.calendar import normalize_civil, to_sort_key
from clinicbooks.domain.entities import (
    AccountBalance,
    AccountNode,
    BalanceSheet,
    LedgerEntry,
    MainAccountType,
    ProfitAndLoss,
)

logger = logging.getLogger(__name__)

BalanceLookup = Union[Callable[[int], Decimal], Mapping[int, Decimal]]

# Accounts whose balance grows with debits; the rest grow with credits.
DEBIT_NORMAL_TYPES = frozenset({MainAccountType.ASSET, MainAccountType.EXPENSE})


def _as_callable(balance_of: BalanceLookup) -> Callable[[int], Decimal]:
    if isinstance(balance_of, Mapping):
        return lambda account_id: balance_of.get(account_id, Decimal("0"))
    return balance_of


class AccountTree:
    """Arena of account nodes addressed by slot index.

    Parent links are slot indices. A parent id that names no node is
    treated as a root.
    """

    def __init__(self, nodes: Iterable[AccountNode]):
        self._nodes: list[AccountNode] = []
        self._slot_by_id: dict[int, int] = {}
        for node in nodes:
            if node.id in self._slot_by_id:
                logger.warning("Duplicate account id %s ignored", node.id)
                continue
            self._slot_by_id[node.id] = len(self._nodes)
            self._nodes.append(node)

        self._parent: list[Optional[int]] = []
        self._children: list[list[int]] = [[] for _ in self._nodes]
        for slot, node in enumerate(self._nodes):
            parent_slot = None
            if node.parent_id is not None:
                parent_slot = self._slot_by_id.get(node.parent_id)
                if parent_slot is None:
                    logger.warning(
                        "Account %s references missing parent %s; treating it as a root",
                        node.id,
                        node.parent_id,
                    )
            self._parent.append(parent_slot)
            if parent_slot is not None:
                self._children[parent_slot].append(slot)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._slot_by_id

    def get(self, account_id: int) -> Optional[AccountNode]:
        slot = self._slot_by_id.get(account_id)
        return None if slot is None else self._nodes[slot]

    def nodes(self) -> list[AccountNode]:
        return list(self._nodes)

    def roots(self) -> list[AccountNode]:
        return [self._nodes[s] for s, parent in enumerate(self._parent) if parent is None]

    def children_of(self, account_id: int) -> list[AccountNode]:
        slot = self._slot_by_id.get(account_id)
        if slot is None:
            return []
        return [self._nodes[child] for child in self._children[slot]]

    def has_children(self, account_id: int) -> bool:
        slot = self._slot_by_id.get(account_id)
        return slot is not None and bool(self._children[slot])

    def has_cycle(self) -> bool:
        """True when following parent links from some node loops."""
        for start in range(len(self._nodes)):
            seen = set()
            slot: Optional[int] = start
            while slot is not None:
                if slot in seen:
                    return True
                seen.add(slot)
                slot = self._parent[slot]
        return False

    def rolled_up_balance(self, account_id: int, balance_of: BalanceLookup) -> Decimal:
        """Own balance plus the rolled-up balances of every descendant.

        Each node is visited at most once per call. A node reached a second
        time (a cycle in parent links) contributes nothing. Unknown ids
        roll up to zero.

        Args:
            account_id: Account whose subtree is summed
            balance_of: Ledger balance per account id (callable or mapping)

        Returns:
            The rolled-up balance
        """
        root = self._slot_by_id.get(account_id)
        if root is None:
            return Decimal("0")
        lookup = _as_callable(balance_of)

        total = Decimal("0")
        visited: set[int] = set()
        stack = [root]
        while stack:
            slot = stack.pop()
            if slot in visited:
                logger.warning(
                    "Account %s re-entered while rolling up %s; cycle skipped",
                    self._nodes[slot].id,
                    account_id,
                )
                continue
            visited.add(slot)
            total += lookup(self._nodes[slot].id)
            stack.extend(self._children[slot])
        return total

    def rolled_up_balances(self, balance_of: BalanceLookup) -> dict[int, Decimal]:
        """Rolled-up balance of every node, keyed by account id."""
        lookup = _as_callable(balance_of)
        return {node.id: self.rolled_up_balance(node.id, lookup) for node in self._nodes}

    def walk(self) -> Iterator[tuple[AccountNode, int]]:
        """Depth-first (node, depth) pairs from each root, children by code."""
        visited: set[int] = set()
        roots = sorted(
            (s for s, parent in enumerate(self._parent) if parent is None),
            key=lambda s: self._nodes[s].code,
        )
        stack = [(slot, 0) for slot in reversed(roots)]
        while stack:
            slot, depth = stack.pop()
            if slot in visited:
                continue
            visited.add(slot)
            yield self._nodes[slot], depth
            children = sorted(self._children[slot], key=lambda s: self._nodes[s].code)
            stack.extend((child, depth + 1) for child in reversed(children))

    def unreachable(self) -> list[AccountNode]:
        """Nodes no root leads to: members of parent cycles and their descendants."""
        reached = {node.id for node, _ in self.walk()}
        return [node for node in self._nodes if node.id not in reached]


def ledger_balances(
    entries: Iterable[LedgerEntry],
    accounts: Optional[Iterable[AccountNode]] = None,
    as_of: Optional[str] = None,
) -> dict[int, Decimal]:
    """Sum ledger entries per account.

    Without ``accounts`` a balance is ``debit - credit``. With ``accounts``
    each balance takes the normal sign of its main type and entries for
    unknown accounts are skipped. ``as_of`` keeps entries dated on or before
    that civil date.
    """
    types = None
    if accounts is not None:
        types = {account.id: account.main_type for account in accounts}
    as_of_key = to_sort_key(as_of) if as_of else None

    balances: dict[int, Decimal] = {}
    for entry in entries:
        if as_of_key is not None and to_sort_key(entry.date) > as_of_key:
            continue
        if types is None:
            change = entry.debit - entry.credit
        else:
            main_type = types.get(entry.account_id)
            if main_type is None:
                continue
            if main_type in DEBIT_NORMAL_TYPES:
                change = entry.debit - entry.credit
            else:
                change = entry.credit - entry.debit
        balances[entry.account_id] = balances.get(entry.account_id, Decimal("0")) + change
    return balances


def build_balance_sheet(
    accounts: Sequence[AccountNode],
    entries: Iterable[LedgerEntry],
    as_of: str,
) -> BalanceSheet:
    """Balance sheet of root accounts as of a civil date.

    Retained earnings are the income balances less the expense balances up
    to ``as_of``; they are added to equity.
    """
    tree = AccountTree(accounts)
    balances = ledger_balances(entries, accounts, as_of)

    retained = Decimal("0")
    for account_id, balance in balances.items():
        node = tree.get(account_id)
        if node is None:
            continue
        if node.main_type == MainAccountType.INCOME:
            retained += balance
        elif node.main_type == MainAccountType.EXPENSE:
            retained -= balance

    def section(main_type: MainAccountType) -> tuple[AccountBalance, ...]:
        roots = sorted(
            (node for node in tree.roots() if node.main_type == main_type),
            key=lambda node: node.code,
        )
        return tuple(
            AccountBalance(
                account=node,
                balance=tree.rolled_up_balance(node.id, balances),
                has_children=tree.has_children(node.id),
            )
            for node in roots
        )

    assets = section(MainAccountType.ASSET)
    liabilities = section(MainAccountType.LIABILITY)
    equity = section(MainAccountType.EQUITY)
    return BalanceSheet(
        as_of=normalize_civil(as_of),
        assets=assets,
        liabilities=liabilities,
        equity=equity,
        retained_earnings=retained,
        total_assets=sum((row.balance for row in assets), Decimal("0")),
        total_liabilities=sum((row.balance for row in liabilities), Decimal("0")),
        total_equity=sum((row.balance for row in equity), Decimal("0")) + retained,
    )


def build_profit_and_loss(
    accounts: Sequence[AccountNode],
    entries: Iterable[LedgerEntry],
    start: str,
    end: str,
) -> ProfitAndLoss:
    """Income and expenses posted between two civil dates, both inclusive.

    Only sub-accounts count; entries posted straight to a root income or
    expense account are left out. Income is ``credit - debit`` and expense
    ``debit - credit``.
    """
    income_ids = set()
    expense_ids = set()
    for account in accounts:
        if account.parent_id is None:
            continue
        if account.main_type == MainAccountType.INCOME:
            income_ids.add(account.id)
        elif account.main_type == MainAccountType.EXPENSE:
            expense_ids.add(account.id)

    start_key, end_key = to_sort_key(start), to_sort_key(end)
    income = Decimal("0")
    expense = Decimal("0")
    for entry in entries:
        if not start_key <= to_sort_key(entry.date) <= end_key:
            continue
        if entry.account_id in income_ids:
            income += entry.credit - entry.debit
        elif entry.account_id in expense_ids:
            expense += entry.debit - entry.credit

    return ProfitAndLoss(
        start=normalize_civil(start),
        end=normalize_civil(end),
        total_income=income,
        total_expense=expense,
    )
