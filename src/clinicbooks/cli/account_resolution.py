"""CLI helpers for account resolution and error handling."""

from __future__ import annotations

import click
from clinicbooks.domain.account import AccountService
from clinicbooks.domain.entities import AccountNode
from clinicbooks.cli.error_handling import handle_domain_error


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str
) -> AccountNode:
    """Resolve account code or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return account_service.resolve_account(account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
