"""Tests for the account tree and balance rollups."""

import itertools
import pytest
from decimal import Decimal

from clinicbooks.domain.account_tree import (
    AccountTree,
    build_balance_sheet,
    build_profit_and_loss,
    ledger_balances,
)
from clinicbooks.domain.entities import AccountNode, LedgerEntry, MainAccountType

ASSET = MainAccountType.ASSET

R = AccountNode(1, "1", "R", None, ASSET)
A = AccountNode(2, "11", "A", 1, ASSET)
B = AccountNode(3, "12", "B", 1, ASSET)
C = AccountNode(4, "111", "C", 2, ASSET)

BALANCES = {1: Decimal("1"), 2: Decimal("10"), 3: Decimal("100"), 4: Decimal("1000")}


@pytest.mark.parametrize("nodes", list(itertools.permutations([R, A, B, C])))
def test_rollup_sums_subtree_in_any_order(nodes):
    """R{A{C}, B} rolls up to the sum of all four balances."""
    tree = AccountTree(nodes)

    assert tree.rolled_up_balance(1, BALANCES) == Decimal("1111")
    assert tree.rolled_up_balance(2, BALANCES) == Decimal("1010")
    assert tree.rolled_up_balance(3, BALANCES) == Decimal("100")


def test_rollup_accepts_callable():
    tree = AccountTree([R, A, B, C])

    assert tree.rolled_up_balance(1, lambda account_id: Decimal("2")) == Decimal("8")


def test_rollup_unknown_account_is_zero():
    assert AccountTree([R]).rolled_up_balance(99, BALANCES) == Decimal("0")


def test_cycle_terminates_and_counts_each_node_once(caplog):
    """X -> Y -> X never loops forever."""
    x = AccountNode(10, "10", "X", 11, ASSET)
    y = AccountNode(11, "11", "Y", 10, ASSET)
    tree = AccountTree([x, y])
    balances = {10: Decimal("5"), 11: Decimal("7")}

    with caplog.at_level("WARNING"):
        total = tree.rolled_up_balance(10, balances)

    assert total == Decimal("12")
    assert tree.has_cycle()
    assert "cycle skipped" in caplog.text


def test_self_parent_is_cycle():
    node = AccountNode(1, "1", "Self", 1, ASSET)
    tree = AccountTree([node])

    assert tree.rolled_up_balance(1, {1: Decimal("3")}) == Decimal("3")
    assert tree.has_cycle()


def test_dangling_parent_becomes_root(caplog):
    orphan = AccountNode(5, "5", "Orphan", 42, ASSET)

    with caplog.at_level("WARNING"):
        tree = AccountTree([orphan])

    assert tree.roots() == [orphan]
    assert "missing parent" in caplog.text


def test_tree_queries():
    tree = AccountTree([C, B, A, R])

    assert not tree.has_cycle()
    assert tree.roots() == [R]
    assert sorted(node.id for node in tree.children_of(1)) == [2, 3]
    assert tree.has_children(2)
    assert not tree.has_children(4)
    assert [(node.code, depth) for node, depth in tree.walk()] == [
        ("1", 0),
        ("11", 1),
        ("111", 2),
        ("12", 1),
    ]


def test_ledger_balances_plain_debit_minus_credit():
    entries = [
        LedgerEntry(1, "1403/01/01", 2, Decimal("100"), Decimal("0")),
        LedgerEntry(2, "1403/01/02", 2, Decimal("0"), Decimal("30")),
        LedgerEntry(3, "1403/01/03", 3, Decimal("0"), Decimal("50")),
    ]

    assert ledger_balances(entries) == {2: Decimal("70"), 3: Decimal("-50")}


def test_ledger_balances_as_of_filters_later_entries():
    entries = [
        LedgerEntry(1, "1403/01/01", 2, Decimal("100"), Decimal("0")),
        LedgerEntry(2, "1403/02/01", 2, Decimal("100"), Decimal("0")),
    ]

    assert ledger_balances(entries, as_of="1403/01/31") == {2: Decimal("100")}


def test_balance_sheet_balances():
    """Opening capital plus a month of income and rent balances out."""
    accounts = [
        AccountNode(1, "1", "Assets", None, MainAccountType.ASSET),
        AccountNode(2, "11", "Cash", 1, MainAccountType.ASSET),
        AccountNode(3, "3", "Capital", None, MainAccountType.EQUITY),
        AccountNode(4, "4", "Income", None, MainAccountType.INCOME),
        AccountNode(5, "5", "Rent", None, MainAccountType.EXPENSE),
        AccountNode(6, "2", "Loans", None, MainAccountType.LIABILITY),
    ]
    entries = [
        # Capital paid in
        LedgerEntry(1, "1403/01/01", 2, Decimal("1000"), Decimal("0")),
        LedgerEntry(2, "1403/01/01", 3, Decimal("0"), Decimal("1000")),
        # Income received
        LedgerEntry(3, "1403/01/10", 2, Decimal("500"), Decimal("0")),
        LedgerEntry(4, "1403/01/10", 4, Decimal("0"), Decimal("500")),
        # Rent paid
        LedgerEntry(5, "1403/01/20", 2, Decimal("0"), Decimal("200")),
        LedgerEntry(6, "1403/01/20", 5, Decimal("200"), Decimal("0")),
        # Loan taken
        LedgerEntry(7, "1403/01/25", 2, Decimal("300"), Decimal("0")),
        LedgerEntry(8, "1403/01/25", 6, Decimal("0"), Decimal("300")),
        # After the report date
        LedgerEntry(9, "1403/02/05", 2, Decimal("999"), Decimal("0")),
    ]

    sheet = build_balance_sheet(accounts, entries, "1403/1/31")

    assert sheet.as_of == "1403/01/31"
    assert [row.account.code for row in sheet.assets] == ["1"]
    assert sheet.assets[0].balance == Decimal("1600")
    assert sheet.assets[0].has_children
    assert sheet.total_liabilities == Decimal("300")
    assert sheet.retained_earnings == Decimal("300")
    assert sheet.total_equity == Decimal("1300")
    assert sheet.total_assets == sheet.total_liabilities_and_equity


def test_cycle_members_are_unreachable():
    x = AccountNode(10, "10", "X", 11, ASSET)
    y = AccountNode(11, "11", "Y", 10, ASSET)
    z = AccountNode(12, "12", "Z", 10, ASSET)
    tree = AccountTree([R, x, y, z])

    assert [node.code for node, _ in tree.walk()] == ["1"]
    assert sorted(node.code for node in tree.unreachable()) == ["10", "11", "12"]
    assert AccountTree([R, A, B, C]).unreachable() == []


INCOME = MainAccountType.INCOME
EXPENSE = MainAccountType.EXPENSE

PNL_ACCOUNTS = [
    AccountNode(40, "4", "Income", None, INCOME),
    AccountNode(41, "41", "Visits", 40, INCOME),
    AccountNode(50, "5", "Expenses", None, EXPENSE),
    AccountNode(51, "51", "Rent", 50, EXPENSE),
    R,
]


def _entry(entry_id, date, account_id, debit="0", credit="0"):
    return LedgerEntry(entry_id, date, account_id, Decimal(debit), Decimal(credit))


def test_profit_and_loss_range_is_inclusive():
    entries = [
        _entry(1, "1403/06/30", 41, credit="1"),
        _entry(2, "1403/07/01", 41, credit="10"),
        _entry(3, "1403/07/31", 41, credit="100", debit="40"),
        _entry(4, "1403/08/01", 41, credit="1000"),
        _entry(5, "1403/07/15", 51, debit="30"),
        _entry(6, "1403/7/20", 51, debit="5", credit="2"),
    ]

    report = build_profit_and_loss(PNL_ACCOUNTS, entries, "1403/07/01", "1403/7/31")

    assert (report.start, report.end) == ("1403/07/01", "1403/07/31")
    assert report.total_income == Decimal("70")
    assert report.total_expense == Decimal("33")
    assert report.net_profit == Decimal("37")


def test_profit_and_loss_skips_root_and_other_accounts():
    entries = [
        _entry(1, "1403/07/05", 40, credit="500"),
        _entry(2, "1403/07/05", 50, debit="200"),
        _entry(3, "1403/07/05", 1, debit="700"),
    ]

    report = build_profit_and_loss(PNL_ACCOUNTS, entries, "1403/07/01", "1403/07/31")

    assert report.total_income == Decimal("0")
    assert report.total_expense == Decimal("0")
