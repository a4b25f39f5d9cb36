"""Commands for recording source records."""

import click
from clinicbooks.cli.account_resolution import resolve_account_or_exit
from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.cli.formatting import format_amount
from clinicbooks.domain.account import AccountService
from clinicbooks.domain.entities import DueType, PaymentKind, PayslipStatus
from clinicbooks.domain.records import RecordService
from clinicbooks.utils.amount_parser import parse_amount
from clinicbooks.utils.date_parser import parse_date

DATE_HELP = "Date (YYYY/MM/DD or relative like 'today', 'yesterday')"


def _parse_date_or_exit(ctx, text: str):
    try:
        return parse_date(text, today=ctx.obj["today"])
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _parse_amount_or_exit(ctx, text: str):
    try:
        return parse_amount(text)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


@click.group()
def add_group():
    """Record payments, expenses, invoices and other records."""
    pass


@add_group.command("payment")
@click.option("--date", default="today", show_default=True, help=DATE_HELP)
@click.option("--amount", required=True, help="Amount (e.g., 1,250,000)")
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in PaymentKind], case_sensitive=False),
    default=PaymentKind.RECEIPT.value,
    show_default=True,
    help="Receipt (money in) or disbursement (money out)",
)
@click.option("--entity", required=True, help="Contact id (e.g., patient-1)")
@click.option("--account", required=True, help="Cash or bank account code or ID")
@click.option("--method", help="Payment method (cash, card, transfer, ...)")
@click.option("--invoice", help="Invoice id this payment settles")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--description", default="", help="Description")
@click.pass_context
def add_payment(
    ctx,
    date: str,
    amount: str,
    kind: str,
    entity: str,
    account: str,
    method: str | None,
    invoice: str | None,
    tags: tuple[str, ...],
    description: str,
):
    """Record a payment.

    Examples:
        clinicbooks add payment --amount 1,500,000 --entity patient-1 --account 11
        clinicbooks add payment --kind disbursement --amount 800000 --entity supplier-1 --account 11 --method card
    """
    db = ctx.obj["db"]
    account_obj = resolve_account_or_exit(ctx, AccountService(db), account)
    payment_date = _parse_date_or_exit(ctx, date)
    payment_amount = _parse_amount_or_exit(ctx, amount)

    try:
        payment_id = RecordService(db).add_payment(
            date=payment_date,
            amount=payment_amount,
            kind=PaymentKind(kind.lower()),
            entity_id=entity,
            account_id=account_obj.id,
            description=description,
            method=method,
            invoice_id=invoice,
            tags=tags,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created payment {payment_id}")
    click.echo(f"  Date: {payment_date}")
    click.echo(f"  Amount: {format_amount(payment_amount)} ({kind.lower()})")


@add_group.command("expense")
@click.option("--date", default="today", show_default=True, help=DATE_HELP)
@click.option("--amount", required=True, help="Amount")
@click.option("--expense-account", required=True, help="Expense account code or ID")
@click.option("--from-account", required=True, help="Cash or bank account code or ID paid from")
@click.option("--to", "to_entity", required=True, help="Contact id paid to")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--description", default="", help="Description")
@click.pass_context
def add_expense(
    ctx,
    date: str,
    amount: str,
    expense_account: str,
    from_account: str,
    to_entity: str,
    tags: tuple[str, ...],
    description: str,
):
    """Record an expense.

    Examples:
        clinicbooks add expense --amount 2,000,000 --expense-account 51 --from-account 11 --to supplier-1
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    expense_obj = resolve_account_or_exit(ctx, account_service, expense_account)
    from_obj = resolve_account_or_exit(ctx, account_service, from_account)
    expense_date = _parse_date_or_exit(ctx, date)
    expense_amount = _parse_amount_or_exit(ctx, amount)

    try:
        expense_id = RecordService(db).add_expense(
            date=expense_date,
            amount=expense_amount,
            expense_account_id=expense_obj.id,
            from_account_id=from_obj.id,
            to_entity_id=to_entity,
            description=description,
            tags=tags,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created expense {expense_id}")
    click.echo(f"  Date: {expense_date}")
    click.echo(f"  Amount: {format_amount(expense_amount)} ({expense_obj.name})")


@add_group.command("invoice")
@click.option("--date", default="today", show_default=True, help=DATE_HELP)
@click.option("--recipient", required=True, help="Recipient name")
@click.option("--share", required=True, help="Patient share of the invoice")
@click.option("--paid", default="0", show_default=True, help="Amount already paid")
@click.option("--id", "invoice_id", help="Invoice id (generated if omitted)")
@click.pass_context
def add_invoice(ctx, date: str, recipient: str, share: str, paid: str, invoice_id: str | None):
    """Record an invoice.

    Examples:
        clinicbooks add invoice --recipient "Sara Ahmadi" --share 3,000,000 --paid 1,000,000
    """
    invoice_date = _parse_date_or_exit(ctx, date)
    patient_share = _parse_amount_or_exit(ctx, share)
    paid_amount = _parse_amount_or_exit(ctx, paid)

    try:
        created_id = RecordService(ctx.obj["db"]).add_invoice(
            date=invoice_date,
            recipient_name=recipient,
            patient_share=patient_share,
            paid_amount=paid_amount,
            invoice_id=invoice_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created invoice {created_id}")


@add_group.command("due")
@click.option(
    "--type",
    "due_type",
    type=click.Choice([due_type.value for due_type in DueType], case_sensitive=False),
    required=True,
    help="Payable (the clinic owes) or receivable (owed to the clinic)",
)
@click.option("--amount", required=True, help="Amount")
@click.option("--due-date", required=True, help=DATE_HELP)
@click.option("--entity", required=True, help="Contact id")
@click.option("--description", default="", help="Description")
@click.pass_context
def add_due(ctx, due_type: str, amount: str, due_date: str, entity: str, description: str):
    """Record a payable or receivable.

    Examples:
        clinicbooks add due --type payable --amount 4,000,000 --due-date 1403/08/01 --entity supplier-1
    """
    parsed_date = _parse_date_or_exit(ctx, due_date)
    due_amount = _parse_amount_or_exit(ctx, amount)

    try:
        due_id = RecordService(ctx.obj["db"]).add_due(
            type=DueType(due_type.lower()),
            amount=due_amount,
            due_date=parsed_date,
            entity_id=entity,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created {due_type.lower()} {due_id} due {parsed_date}")


@add_group.command("item")
@click.argument("name")
@click.option("--quantity", type=int, required=True, help="Quantity in stock")
@click.option("--reorder-point", type=int, required=True, help="Reorder at or below this quantity")
@click.pass_context
def add_item(ctx, name: str, quantity: int, reorder_point: int):
    """Add an inventory item."""
    try:
        item_id = RecordService(ctx.obj["db"]).add_inventory_item(
            name=name, quantity=quantity, reorder_point=reorder_point
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created inventory item '{name}' (ID: {item_id})")


@add_group.command("payslip")
@click.argument("employee_name")
@click.option("--period", "pay_period", required=True, help="Pay period (e.g., 1403/07)")
@click.option("--net", default="0", help="Net payable amount")
@click.option("--paid", is_flag=True, help="Mark the payslip as already paid")
@click.pass_context
def add_payslip(ctx, employee_name: str, pay_period: str, net: str, paid: bool):
    """Add a payslip."""
    net_payable = _parse_amount_or_exit(ctx, net)
    try:
        payslip_id = RecordService(ctx.obj["db"]).add_payslip(
            employee_name=employee_name,
            pay_period=pay_period,
            net_payable=net_payable,
            status=PayslipStatus.PAID if paid else PayslipStatus.AWAITING_PAYMENT,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created payslip {payslip_id} for {employee_name} ({pay_period})")


def register_commands(cli):
    """Register add commands with main CLI."""
    cli.add_command(add_group, name="add")
