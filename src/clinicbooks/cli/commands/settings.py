"""Settings commands."""

import click
from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.domain.settings import SettingsService


@click.group()
def settings_group():
    """View and change settings."""
    pass


@settings_group.command("alerts")
@click.option("--low-inventory/--no-low-inventory", default=None, help="Low stock alerts")
@click.option("--overdue-invoices/--no-overdue-invoices", default=None, help="Overdue invoice alerts")
@click.option("--upcoming-dues/--no-upcoming-dues", default=None, help="Past-due payable/receivable alerts")
@click.option("--pending-payslips/--no-pending-payslips", default=None, help="Unpaid payslip alerts")
@click.option("--overdue-invoice-days", type=int, help="Days before an unpaid invoice is overdue")
@click.option("--upcoming-due-days", type=int, help="Days ahead shown by 'dues'")
@click.pass_context
def alert_settings(
    ctx,
    low_inventory: bool | None,
    overdue_invoices: bool | None,
    upcoming_dues: bool | None,
    pending_payslips: bool | None,
    overdue_invoice_days: int | None,
    upcoming_due_days: int | None,
):
    """Show alert settings, changing any that are given.

    Examples:
        clinicbooks settings alerts
        clinicbooks settings alerts --no-low-inventory --overdue-invoice-days 45
    """
    service = SettingsService(ctx.obj["db"])
    try:
        settings = service.update_alert_settings(
            low_inventory=low_inventory,
            overdue_invoices=overdue_invoices,
            upcoming_dues=upcoming_dues,
            pending_payslips=pending_payslips,
            overdue_invoice_days=overdue_invoice_days,
            upcoming_due_days=upcoming_due_days,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    def on_off(flag: bool) -> str:
        return "on" if flag else "off"

    click.echo(f"Low inventory:      {on_off(settings.low_inventory)}")
    click.echo(f"Overdue invoices:   {on_off(settings.overdue_invoices)} (after {settings.overdue_invoice_days} days)")
    click.echo(f"Upcoming dues:      {on_off(settings.upcoming_dues)} (next {settings.upcoming_due_days} days)")
    click.echo(f"Pending payslips:   {on_off(settings.pending_payslips)}")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
