"""Payables and receivables commands."""

import click
from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.cli.formatting import format_amount
from clinicbooks.domain.dashboard import DashboardService
from clinicbooks.domain.entities import DueType
from clinicbooks.domain.records import RecordService


@click.group(invoke_without_command=True)
@click.pass_context
def dues_group(ctx):
    """Show upcoming dues and outstanding totals."""
    if ctx.invoked_subcommand is not None:
        return

    service = DashboardService(ctx.obj["db"], today=ctx.obj["today"])
    upcoming = service.upcoming_dues()
    if not upcoming:
        click.echo("No dues in the coming days.")
    else:
        click.echo("Upcoming dues:")
        for due in upcoming:
            click.echo(
                f"  {due.id:<5} {due.due_date:<12} {due.type.value:<11} "
                f"{format_amount(due.amount):>16}  {due.description}"
            )

    totals = service.outstanding_totals()
    click.echo(f"Pending receivables: {format_amount(totals[DueType.RECEIVABLE])}")
    click.echo(f"Pending payables: {format_amount(totals[DueType.PAYABLE])}")


@dues_group.command("settle")
@click.argument("due_id", type=int)
@click.pass_context
def settle_due(ctx, due_id: int):
    """Mark a payable or receivable as paid."""
    try:
        RecordService(ctx.obj["db"]).settle_due(due_id)
        click.echo(f"Settled due {due_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register dues commands with main CLI."""
    cli.add_command(dues_group, name="dues")
