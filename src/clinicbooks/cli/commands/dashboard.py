"""Dashboard commands: period comparisons, series, KPIs, alerts and calendar."""

import click
from clinicbooks.cli.date_filters import resolve_cli_date_range
from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.cli.formatting import format_amount, format_trend
from clinicbooks.domain.calendar import month_end, month_start
from clinicbooks.domain.dashboard import DashboardService
from clinicbooks.domain.entities import Granularity, Severity
from clinicbooks.domain.kpi import trend

SECTION_TITLES = {"daily": "Daily", "weekly": "Weekly", "monthly": "Monthly"}


def _service(ctx) -> DashboardService:
    return DashboardService(ctx.obj["db"], today=ctx.obj["today"])


@click.command("compare")
@click.pass_context
def compare(ctx):
    """Compare income and expenses across recent days, weeks and months."""
    comparisons = _service(ctx).comparisons()

    for key, windows in comparisons.items():
        click.echo(f"\n{SECTION_TITLES[key]}")
        click.echo("-" * 86)
        click.echo(f"{'Period':<14} {'Range':<25} {'Income':>14} {'Expenses':>14} {'Net':>14}")
        for window in windows:
            click.echo(
                f"{window.label:<14} {window.start + ' - ' + window.end:<25} "
                f"{format_amount(window.total_inflow):>14} "
                f"{format_amount(window.total_outflow):>14} "
                f"{format_amount(window.net):>14}"
            )
        current, previous = windows[0], windows[1]
        click.echo(f"Income trend: {format_trend(trend(current.total_inflow, previous.total_inflow))}")


@click.command("series")
@click.option(
    "--period",
    "granularity",
    type=click.Choice([g.value for g in Granularity], case_sensitive=False),
    default=Granularity.WEEK.value,
    show_default=True,
    help="Bucket size",
)
@click.option("--count", type=int, default=4, show_default=True, help="Number of buckets")
@click.pass_context
def series(ctx, granularity: str, count: int):
    """Show income and expenses per day, week or month, oldest first."""
    try:
        buckets = _service(ctx).series(count, Granularity(granularity.lower()))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"{'Bucket':<10} {'Income':>16} {'Expenses':>16}")
    click.echo("-" * 44)
    for bucket in buckets:
        click.echo(
            f"{bucket.label:<10} {format_amount(bucket.inflow):>16} {format_amount(bucket.outflow):>16}"
        )


@click.command("kpi")
@click.pass_context
def kpi(ctx):
    """Show financial health KPIs for the last 30 days."""
    for item in _service(ctx).kpis():
        if item.favorable is None:
            verdict = ""
        else:
            verdict = " (good)" if item.favorable else " (bad)"
        click.echo(
            f"{item.title:<30} {format_amount(item.value):>16}  "
            f"{format_trend(item.trend)}{verdict}"
        )


@click.command("alerts")
@click.pass_context
def alerts(ctx):
    """Show alerts for enabled categories."""
    found = _service(ctx).alerts()
    if not found:
        click.echo("No alerts.")
        return

    for alert in found:
        marker = "!!" if alert.severity == Severity.DANGER else " !"
        click.echo(f"{marker} {alert.message} [{alert.target_ref}]")


@click.command("calendar")
@click.option("--start-date", help="Start date (YYYY/MM/DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY/MM/DD or relative like 'today')")
@click.option("--last-month", is_flag=True, help="Show the previous month")
@click.option("--this-week", is_flag=True, help="Show the current week")
@click.pass_context
def calendar(ctx, start_date: str | None, end_date: str | None, last_month: bool, this_week: bool):
    """List receipts, expenses and pending dues by Gregorian date.

    Defaults to the current civil month.
    """
    today = ctx.obj["today"]
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={"last-month": last_month, "this-week": this_week},
        default_range=(month_start(today), month_end(today)),
    )

    events = _service(ctx).calendar_events(start, end)
    if not events:
        click.echo("No calendar events.")
        return

    for event in events:
        click.echo(
            f"{event.gregorian_date.isoformat()}  {event.civil_date}  "
            f"{event.kind.value:<15} {event.title}"
        )


def register_commands(cli):
    """Register dashboard commands with main CLI."""
    cli.add_command(compare)
    cli.add_command(series)
    cli.add_command(kpi)
    cli.add_command(alerts)
    cli.add_command(calendar)
