"""Contact commands."""

import click
from clinicbooks.cli.error_handling import handle_domain_error
from clinicbooks.domain.contact import KNOWN_KINDS, ContactService


@click.group()
def contact_group():
    """Manage patients, suppliers and staff."""
    pass


@contact_group.command("add")
@click.argument("kind", type=click.Choice(KNOWN_KINDS, case_sensitive=False))
@click.argument("name")
@click.option("--number", type=int, help="Numeric part of the contact id (next free number if omitted)")
@click.pass_context
def add_contact(ctx, kind: str, name: str, number: int | None):
    """Add a contact.

    Examples:
        clinicbooks contact add patient "Sara Ahmadi"
        clinicbooks contact add supplier "Dental Supply Co" --number 10
    """
    service = ContactService(ctx.obj["db"])
    try:
        contact_id = service.create_contact(kind=kind, name=name, number=number)
        click.echo(f"Created contact '{name}' (ID: {contact_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@contact_group.command("list")
@click.option("--kind", type=click.Choice(KNOWN_KINDS, case_sensitive=False), help="Only this kind")
@click.pass_context
def list_contacts(ctx, kind: str | None):
    """List contacts."""
    contacts = ContactService(ctx.obj["db"]).list_contacts(kind=kind)
    if not contacts:
        click.echo("No contacts found.")
        return

    for contact in contacts:
        click.echo(f"{contact.id:<16} {contact.kind:<10} {contact.name}")


def register_commands(cli):
    """Register contact commands with main CLI."""
    cli.add_command(contact_group, name="contact")
