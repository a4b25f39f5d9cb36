"""Tests for the chart of accounts: service and commands."""

import pytest
from decimal import Decimal

from clinicbooks.cli.main import cli
from clinicbooks.domain.entities import MainAccountType
from clinicbooks.domain.errors import ConflictError, NotFoundError, ValidationError


class TestAccountService:
    def test_child_inherits_parent_type(self, account_service, sample_chart):
        cash = account_service.get_account(sample_chart["11"])

        assert cash.main_type == MainAccountType.ASSET
        assert cash.parent_id == sample_chart["1"]

    def test_child_type_must_match_parent(self, account_service, sample_chart):
        with pytest.raises(ValidationError, match="does not match"):
            account_service.create_account(
                "13", "Odd", MainAccountType.INCOME, parent_id=sample_chart["1"]
            )

    def test_root_needs_type(self, account_service):
        with pytest.raises(ValidationError, match="main type"):
            account_service.create_account("9", "Loose")

    def test_duplicate_code(self, account_service, sample_chart):
        with pytest.raises(ConflictError, match="already exists"):
            account_service.create_account("11", "Cash again", parent_id=sample_chart["1"])

    def test_missing_parent(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.create_account("99", "Orphan", MainAccountType.ASSET, parent_id=999)

    def test_resolve_by_code_then_id(self, account_service, sample_chart):
        assert account_service.resolve_account("51").id == sample_chart["51"]
        assert account_service.resolve_account(str(sample_chart["12"])).code == "12"
        with pytest.raises(NotFoundError, match="Account 'nope' not found"):
            account_service.resolve_account("nope")

    def test_post_entry_and_balance(self, account_service, sample_chart):
        cash = sample_chart["11"]
        account_service.post_entry("1403/07/01", cash, debit=Decimal("1000"))
        account_service.post_entry("1403/7/2", cash, credit=Decimal("300"), description="Fee")

        entries = account_service.list_entries(account_id=cash)
        assert [entry.date for entry in entries] == ["1403/07/01", "1403/07/02"]
        assert account_service.get_balance(cash) == Decimal("700")
        assert account_service.get_balance(sample_chart["12"]) == Decimal("0")

    def test_post_entry_rejects_bad_amounts(self, account_service, sample_chart):
        cash = sample_chart["11"]
        with pytest.raises(ValidationError, match="non-zero"):
            account_service.post_entry("1403/07/01", cash)
        with pytest.raises(ValidationError, match="negative"):
            account_service.post_entry("1403/07/01", cash, debit=Decimal("-1"))

    def test_post_entry_rejects_bad_date(self, account_service, sample_chart):
        with pytest.raises(ValidationError, match="Invalid date"):
            account_service.post_entry("1402/12/30", sample_chart["11"], debit=Decimal("1"))

    def test_post_entry_missing_account(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.post_entry("1403/07/01", 999, debit=Decimal("1"))

    def test_tree_walks_by_code(self, account_service, sample_chart):
        codes = [node.code for node, _ in account_service.get_tree().walk()]

        assert codes == ["1", "11", "12", "2", "3", "4", "5", "51"]


def test_account_create(cli_runner, temp_db):
    """Test creating root and child accounts."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "1", "Assets", "--type", "asset"]
    )
    assert result.exit_code == 0
    assert "Created account 1 'Assets'" in result.output
    assert "ID:" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "11", "Cash", "--parent", "1"]
    )
    assert result.exit_code == 0
    assert temp_db.get_account_by_code("11").main_type == MainAccountType.ASSET


def test_account_list_empty(cli_runner, temp_db):
    """Test listing accounts when none exist."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "list"]
    )

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_with_data(cli_runner, temp_db, sample_chart):
    """Test listing accounts with data."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "list"]
    )

    assert result.exit_code == 0
    assert "Rent" in result.output
    assert "expense" in result.output


def test_account_create_duplicate(cli_runner, temp_db, sample_chart):
    """Test creating duplicate account code fails."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "1", "Again", "--type", "asset"]
    )

    assert result.exit_code == 1
    assert "already exists" in result.output.lower()


def test_account_create_unknown_parent(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "11", "Cash", "--parent", "1"]
    )

    assert result.exit_code == 1
    assert "Account '1' not found" in result.output


def test_account_tree_rolls_up(cli_runner, temp_db, sample_chart, account_service):
    account_service.post_entry("1403/07/01", sample_chart["11"], debit=Decimal("1000"))
    account_service.post_entry("1403/07/01", sample_chart["12"], debit=Decimal("250"))

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "tree"]
    )

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assets = next(line for line in lines if "1 Assets" in line)
    assert assets.rstrip().endswith("1,250.00")
    assert any(line.startswith("    11 Cash") for line in lines)


def test_ledger_add_and_list(cli_runner, temp_db, sample_chart):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path, "--today", "1403/07/01",
            "ledger", "add", "--account", "11", "--debit", "5,000,000",
            "--description", "Opening cash",
        ],
    )
    assert result.exit_code == 0
    assert "to 11 'Cash'" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "ledger", "list", "--account", "11"]
    )
    assert result.exit_code == 0
    assert "1403/07/01" in result.output
    assert "5,000,000.00" in result.output
    assert "Opening cash" in result.output


def test_ledger_add_rejects_zero(cli_runner, temp_db, sample_chart):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "ledger", "add", "--account", "11"]
    )

    assert result.exit_code == 1
    assert "Error:" in result.output
