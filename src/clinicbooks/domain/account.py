"""Chart-of-accounts domain service."""

from decimal import Decimal
from typing import Optional

from clinicbooks.database.base import Database
from clinicbooks.domain.account_tree import AccountTree, ledger_balances
from clinicbooks.domain.calendar import BaseDate, as_civil
from clinicbooks.domain.entities import AccountNode, LedgerEntry, MainAccountType
from clinicbooks.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_code_taken,
    account_not_found,
)


class AccountService:
    """Service for managing the chart of accounts and its ledger."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        code: str,
        name: str,
        main_type: Optional[MainAccountType] = None,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a chart-of-accounts node.

        A child account takes its parent's main type unless one is given,
        and a given type must match the parent's.

        Args:
            code: Unique chart code (e.g., "1101")
            name: Account name
            main_type: Main type; required for root accounts
            parent_id: Optional parent account ID

        Returns:
            Account ID

        Raises:
            ConflictError: If the code is already used
            NotFoundError: If the parent doesn't exist
            ValidationError: If the main type is missing or differs from the parent's
        """
        code = code.strip()
        if not code:
            raise ValidationError("Account code cannot be empty")
        if self.db.get_account_by_code(code) is not None:
            raise ConflictError(account_code_taken(code))

        if parent_id is not None:
            parent = self.db.get_account(parent_id)
            if parent is None:
                raise NotFoundError(account_not_found(parent_id))
            if main_type is None:
                main_type = parent.main_type
            elif MainAccountType(main_type) != parent.main_type:
                raise ValidationError(
                    f"Account type '{MainAccountType(main_type).value}' does not match "
                    f"parent type '{parent.main_type.value}'"
                )
        elif main_type is None:
            raise ValidationError("Root accounts need a main type")

        return self.db.create_account(
            code=code, name=name, main_type=MainAccountType(main_type), parent_id=parent_id
        )

    def get_account(self, account_id: int) -> Optional[AccountNode]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def resolve_account(self, identifier: str) -> AccountNode:
        """Find an account by chart code or numeric ID.

        Raises:
            NotFoundError: If no account matches
        """
        account = self.db.get_account_by_code(identifier.strip())
        if account is None and identifier.strip().isdigit():
            account = self.db.get_account(int(identifier))
        if account is None:
            raise NotFoundError(f"Account '{identifier}' not found")
        return account

    def list_accounts(self) -> list[AccountNode]:
        return self.db.list_accounts()

    def get_tree(self) -> AccountTree:
        return AccountTree(self.db.list_accounts())

    def post_entry(
        self,
        date: BaseDate,
        account_id: int,
        debit: Decimal = Decimal("0"),
        credit: Decimal = Decimal("0"),
        description: Optional[str] = None,
    ) -> int:
        """Post a ledger entry against an account.

        Args:
            date: Civil date of the entry
            account_id: Account ID
            debit: Debit amount (zero or more)
            credit: Credit amount (zero or more)
            description: Optional description

        Returns:
            Ledger entry ID

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If the date is invalid or the amounts are negative or both zero
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        if debit < 0 or credit < 0:
            raise ValidationError("Debit and credit cannot be negative")
        if debit == 0 and credit == 0:
            raise ValidationError("Either debit or credit must be non-zero")
        return self.db.create_ledger_entry(
            date=str(as_civil(date)),
            account_id=account_id,
            debit=debit,
            credit=credit,
            description=description,
        )

    def list_entries(self, account_id: Optional[int] = None) -> list[LedgerEntry]:
        return self.db.list_ledger_entries(account_id=account_id)

    def get_balance(self, account_id: int) -> Decimal:
        """Plain ``debit - credit`` balance of one account's own entries."""
        balances = ledger_balances(self.db.list_ledger_entries(account_id=account_id))
        return balances.get(account_id, Decimal("0"))
