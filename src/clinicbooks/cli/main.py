"""Main CLI entry point."""

import logging

import click
from clinicbooks.database.factories import create_sqlite_database
from clinicbooks.domain.calendar import civil_today
from clinicbooks.utils.date_parser import parse_date

# Import and register all commands at module level
from clinicbooks.cli.commands import (
    account,
    ledger,
    contact,
    add,
    transactions,
    dashboard,
    dues,
    report,
    settings,
    bank,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CLINICBOOKS_DB_PATH environment variable)",
    envvar="CLINICBOOKS_DB_PATH",
)
@click.option(
    "--today",
    "today",
    help="Reference day for relative dates and dashboards (YYYY/MM/DD, civil calendar)",
    envvar="CLINICBOOKS_TODAY",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level (overrides CLINICBOOKS_LOG_LEVEL environment variable)",
    envvar="CLINICBOOKS_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, today: str | None, log_level: str):
    """Clinicbooks - Clinic bookkeeping dashboard.

    Record payments, expenses, invoices and ledger entries on the civil
    (Jalali) calendar, then review period comparisons, KPIs, alerts and
    the balance sheet.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        ctx.obj["today"] = parse_date(today, today=civil_today()) if today else civil_today()
    except ValueError as e:
        click.echo(f"Error: Invalid --today value: {e}", err=True)
        ctx.exit(1)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
ledger.register_commands(cli)
contact.register_commands(cli)
add.register_commands(cli)
transactions.register_commands(cli)
dashboard.register_commands(cli)
dues.register_commands(cli)
report.register_commands(cli)
settings.register_commands(cli)
bank.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
