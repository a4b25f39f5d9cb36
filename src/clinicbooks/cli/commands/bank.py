"""Bank statement commands."""

import click
from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.cli.formatting import format_amount
from clinicbooks.domain.bank_statement import read_statement
from clinicbooks.domain.entities import StatementDirection, StatementMode


@click.group()
def bank_group():
    """Work with bank statements."""
    pass


@bank_group.command("preview")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in StatementMode], case_sensitive=False),
    help="single: one signed amount column; double: debit and credit columns (detected if omitted)",
)
@click.option("--date-col", help="Date column header")
@click.option("--description-col", help="Description column header")
@click.option("--amount-col", help="Amount column header (single mode)")
@click.option("--debit-col", help="Debit column header (double mode)")
@click.option("--credit-col", help="Credit column header (double mode)")
@click.pass_context
def preview_statement(
    ctx,
    csv_file: str,
    mode: str | None,
    date_col: str | None,
    description_col: str | None,
    amount_col: str | None,
    debit_col: str | None,
    credit_col: str | None,
):
    """Read a bank statement CSV and show how each row is interpreted.

    Columns are detected from English or Persian headers unless given.

    Examples:
        clinicbooks bank preview statement.csv
        clinicbooks bank preview statement.csv --mode double --debit-col Withdrawal --credit-col Deposit
    """
    overrides = {
        field: value
        for field, value in (
            ("date", date_col),
            ("description", description_col),
            ("amount", amount_col),
            ("debit", debit_col),
            ("credit", credit_col),
        )
        if value
    }

    try:
        result = read_statement(
            csv_file,
            mode=StatementMode(mode.lower()) if mode else None,
            overrides=overrides or None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    mapping = result["mapping"]
    click.echo(f"Mode: {mapping.mode.value}")
    lines = result["lines"]
    for line in lines:
        sign = "+" if line.direction == StatementDirection.CREDIT else "-"
        flag = "  ?" if line.ambiguous else ""
        click.echo(
            f"{line.row_number:<5} {line.date:<12} {sign + format_amount(line.amount):>18}  "
            f"{line.description}{flag}"
        )

    click.echo(f"\nRead {len(lines)} line(s)")
    ambiguous = sum(1 for line in lines if line.ambiguous)
    if ambiguous:
        click.echo(f"Zero-amount lines: {ambiguous}")
    if result["errors"]:
        click.echo(f"Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"  {error}", err=True)


def register_commands(cli):
    """Register bank commands with main CLI."""
    cli.add_command(bank_group, name="bank")
