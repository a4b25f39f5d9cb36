"""Ledger commands."""

import click
from clinicbooks.cli.account_resolution import resolve_account_or_exit
from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.cli.formatting import format_amount
from clinicbooks.domain.account import AccountService
from clinicbooks.utils.amount_parser import parse_amount
from clinicbooks.utils.date_parser import parse_date


@click.group()
def ledger_group():
    """Post and view ledger entries."""
    pass


@ledger_group.command("add")
@click.option("--account", required=True, help="Account code or ID")
@click.option("--date", default="today", show_default=True, help="Entry date (YYYY/MM/DD or relative like 'today')")
@click.option("--debit", default="0", help="Debit amount")
@click.option("--credit", default="0", help="Credit amount")
@click.option("--description", help="Entry description")
@click.pass_context
def add_entry(ctx, account: str, date: str, debit: str, credit: str, description: str | None):
    """Post a ledger entry.

    Examples:
        clinicbooks ledger add --account 11 --debit 5,000,000 --description "Opening cash"
        clinicbooks ledger add --account 41 --credit 5,000,000 --date 1403/01/01
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_obj = resolve_account_or_exit(ctx, service, account)

    try:
        entry_date = parse_date(date, today=ctx.obj["today"])
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        debit_amount = parse_amount(debit)
        credit_amount = parse_amount(credit)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        entry_id = service.post_entry(
            date=entry_date,
            account_id=account_obj.id,
            debit=debit_amount,
            credit=credit_amount,
            description=description,
        )
        click.echo(f"Posted entry {entry_id} to {account_obj.code} '{account_obj.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@ledger_group.command("list")
@click.option("--account", help="Account code or ID")
@click.pass_context
def list_entries(ctx, account: str | None):
    """List ledger entries."""
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, service, account).id

    entries = service.list_entries(account_id=account_id)
    if not entries:
        click.echo("No ledger entries found.")
        return

    codes = {acc.id: acc.code for acc in service.list_accounts()}
    click.echo(f"{'ID':<6} {'Date':<12} {'Account':<10} {'Debit':>16} {'Credit':>16}  Description")
    click.echo("-" * 90)
    for entry in entries:
        click.echo(
            f"{entry.id:<6} {entry.date:<12} {codes.get(entry.account_id, '?'):<10} "
            f"{format_amount(entry.debit):>16} {format_amount(entry.credit):>16}  "
            f"{entry.description or ''}"
        )


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
