"""Unified transaction listing command."""

import click
from decimal import Decimal
from clinicbooks.cli.date_filters import resolve_cli_date_range
from clinicbooks.cli.formatting import format_amount
from clinicbooks.domain.dashboard import DashboardService
from clinicbooks.domain.entities import Direction


@click.command("transactions")
@click.option("--limit", type=int, default=20, show_default=True, help="Show at most this many (0 for all)")
@click.option("--start-date", help="Start date (YYYY/MM/DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY/MM/DD or relative like 'today')")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--this-week", is_flag=True, help="Filter to current week")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.option("--last-week", is_flag=True, help="Filter to previous week")
@click.option("--no-disbursements", is_flag=True, help="Leave outgoing payments out")
@click.pass_context
def list_transactions(
    ctx,
    limit: int,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    last_week: bool,
    no_disbursements: bool,
):
    """List payments, expenses and paid invoices as one feed, newest first."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "this-week": this_week,
            "last-month": last_month,
            "last-year": last_year,
            "last-week": last_week,
        },
    )

    service = DashboardService(ctx.obj["db"], today=ctx.obj["today"])
    transactions = service.unified_transactions(include_disbursements=not no_disbursements)
    if start is not None:
        transactions = [txn for txn in transactions if txn.sort_key >= start.sort_key]
    if end is not None:
        transactions = [txn for txn in transactions if txn.sort_key <= end.sort_key]

    if not transactions:
        click.echo("No transactions found.")
        return

    total_inflow = sum(
        (txn.amount for txn in transactions if txn.direction == Direction.INFLOW), Decimal("0")
    )
    total_outflow = sum(
        (txn.amount for txn in transactions if txn.direction == Direction.OUTFLOW), Decimal("0")
    )
    shown = transactions[:limit] if limit > 0 else transactions

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<8} {'Date':<12} {'Amount':>16}  {'Category':<24} {'Counterparty':<20} {'Description':<20}"
    )
    click.echo("-" * 100)
    for txn in shown:
        sign = "+" if txn.direction == Direction.INFLOW else "-"
        click.echo(
            f"{txn.id:<8} {txn.date:<12} {sign + format_amount(txn.amount):>16}  "
            f"{txn.category[:24]:<24} {txn.counterparty_name[:20]:<20} {txn.description[:20]:<20}"
        )
    if len(shown) < len(transactions):
        click.echo(f"... {len(transactions) - len(shown)} more")

    click.echo("-" * 100)
    click.echo(
        f"Income: {format_amount(total_inflow)} | Expenses: {format_amount(total_outflow)} | "
        f"Count: {len(transactions)}"
    )


def register_commands(cli):
    """Register transactions command with main CLI."""
    cli.add_command(list_transactions)
