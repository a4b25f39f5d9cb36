"""Report commands."""

import click
from clinicbooks.cli.date_filters import resolve_cli_date_range
from clinicbooks.cli.formatting import format_amount
from clinicbooks.domain.calendar import CalendarDate
from clinicbooks.domain.dashboard import DashboardService
from clinicbooks.domain.entities import AGING_BUCKET_LABELS
from clinicbooks.utils.date_parser import get_date_range, parse_date


def _echo_section(title, rows, total):
    click.echo(f"\n{title}")
    for row in rows:
        marker = "+" if row.has_children else " "
        label = f"{marker} {row.account.code} {row.account.name}"
        click.echo(f"  {label:<44} {format_amount(row.balance):>18}")
    click.echo(f"  {'Total ' + title.lower():<44} {format_amount(total):>18}")


@click.command("balance-sheet")
@click.option("--as-of", help="Report date (YYYY/MM/DD or relative like 'today'); defaults to today")
@click.pass_context
def balance_sheet(ctx, as_of: str | None):
    """Show the balance sheet as of a date.

    Root account balances include all sub-accounts. Retained earnings
    (income less expenses) are shown under equity.
    """
    today = ctx.obj["today"]
    report_date = today
    if as_of:
        try:
            report_date = parse_date(as_of, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    sheet = DashboardService(ctx.obj["db"], today=today).balance_sheet(report_date)

    click.echo(f"Balance sheet as of {sheet.as_of}")
    _echo_section("Assets", sheet.assets, sheet.total_assets)
    _echo_section("Liabilities", sheet.liabilities, sheet.total_liabilities)
    click.echo("\nEquity")
    for row in sheet.equity:
        label = f"{'+' if row.has_children else ' '} {row.account.code} {row.account.name}"
        click.echo(f"  {label:<44} {format_amount(row.balance):>18}")
    click.echo(f"  {'  Retained earnings':<44} {format_amount(sheet.retained_earnings):>18}")
    click.echo(f"  {'Total equity':<44} {format_amount(sheet.total_equity):>18}")
    click.echo("-" * 66)
    click.echo(
        f"  {'Total liabilities and equity':<44} "
        f"{format_amount(sheet.total_liabilities_and_equity):>18}"
    )


@click.command("pnl")
@click.option("--start-date", help="Start date (YYYY/MM/DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY/MM/DD or relative like 'today')")
@click.option("--this-month", is_flag=True, help="Report on the current month")
@click.option("--this-year", is_flag=True, help="Report on the current year")
@click.option("--last-month", is_flag=True, help="Report on the previous month")
@click.option("--last-year", is_flag=True, help="Report on the previous year")
@click.pass_context
def profit_and_loss(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
):
    """Show income, expenses and net profit over a date range.

    Defaults to the current civil year. Only sub-accounts of income and
    expense roots are counted.
    """
    today = ctx.obj["today"]
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
        },
        default_range=get_date_range("this-year", today=today),
    )
    if start is None:
        start = CalendarDate(today.year, 1, 1)
    if end is None:
        end = today

    report = DashboardService(ctx.obj["db"], today=today).profit_and_loss(start, end)

    click.echo(f"Profit and loss {report.start} - {report.end}")
    click.echo(f"  {'Income':<30} {format_amount(report.total_income):>18}")
    click.echo(f"  {'Expenses':<30} {format_amount(report.total_expense):>18}")
    click.echo("-" * 52)
    click.echo(f"  {'Net profit':<30} {format_amount(report.net_profit):>18}")


@click.command("aging")
@click.pass_context
def invoice_aging(ctx):
    """Show unpaid invoice amounts per recipient by age in days."""
    aging = DashboardService(ctx.obj["db"], today=ctx.obj["today"]).invoice_aging()
    if not aging.rows:
        click.echo("No unpaid invoices.")
        return

    click.echo(f"Invoice aging as of {aging.as_of}")
    header = "".join(f"{label:>16}" for label in (*AGING_BUCKET_LABELS, "Total"))
    click.echo(f"{'Recipient':<24}{header}")
    click.echo("-" * (24 + 16 * (len(AGING_BUCKET_LABELS) + 1)))
    for row in (*aging.rows, aging.totals):
        amounts = "".join(f"{format_amount(amount):>16}" for amount in (*row.buckets, row.total))
        click.echo(f"{row.name:<24}{amounts}")


@click.group("report")
def report_group():
    """Financial reports."""


report_group.add_command(balance_sheet)
report_group.add_command(profit_and_loss)
report_group.add_command(invoice_aging)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group)
    cli.add_command(balance_sheet)
