"""Chart-of-accounts commands."""

import click
from clinicbooks.cli.account_resolution import resolve_account_or_exit
from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.cli.formatting import format_amount
from clinicbooks.domain.account import AccountService
from clinicbooks.domain.dashboard import DashboardService
from clinicbooks.domain.entities import MainAccountType

MAIN_TYPES = [main_type.value for main_type in MainAccountType]
INDENT_SIZE = 4


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "main_type",
    type=click.Choice(MAIN_TYPES, case_sensitive=False),
    help="Main account type (required for root accounts, inherited otherwise)",
)
@click.option("--parent", help="Parent account code or ID")
@click.pass_context
def create_account(ctx, code: str, name: str, main_type: str | None, parent: str | None):
    """Create a new account.

    Examples:
        clinicbooks account create 1 "Assets" --type asset
        clinicbooks account create 11 "Cash" --parent 1
        clinicbooks account create 5 "Expenses" --type expense
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, service, parent).id

    try:
        account_id = service.create_account(
            code=code,
            name=name,
            main_type=MainAccountType(main_type.lower()) if main_type else None,
            parent_id=parent_id,
        )
        click.echo(f"Created account {code} '{name}' (ID: {account_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    codes = {acc.id: acc.code for acc in accounts}
    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        parent = codes.get(acc.parent_id, "-") if acc.parent_id is not None else "-"
        click.echo(
            f"ID: {acc.id:3d} | {acc.code:8s} | {acc.name:25s} | "
            f"{acc.main_type.value:9s} | Parent: {parent}"
        )


@account_group.command("tree")
@click.pass_context
def account_tree(ctx):
    """Show the chart of accounts with rolled-up balances.

    Each balance is the account's own debit minus credit plus that of all
    its descendants.
    """
    db = ctx.obj["db"]
    tree = AccountService(db).get_tree()
    if len(tree) == 0:
        click.echo("No accounts found.")
        return

    balances = DashboardService(db, today=ctx.obj["today"]).rolled_up_balances()
    for node, depth in tree.walk():
        indent_str = " " * (INDENT_SIZE * depth)
        label = f"{node.code} {node.name}"
        width = 50 - INDENT_SIZE * depth
        click.echo(f"{indent_str}{label:<{width}} {format_amount(balances[node.id]):>20}")

    if tree.has_cycle():
        hidden = ", ".join(node.code for node in tree.unreachable())
        click.echo(
            f"Warning: account parent links form a cycle; not shown: {hidden}", err=True
        )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
