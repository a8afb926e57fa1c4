"""Command line reports over a freshly seeded in-memory store."""
from __future__ import annotations

from typing import Optional

import structlog
import typer

from contact_store import log, settings
from contact_store.queries import ContactQueries
from contact_store.seed import seed
from contact_store.store import ContactStore

app = typer.Typer(
    name="contact-store",
    help="Contacts and addresses in an in-memory store.",
    add_completion=False,
)

logger = structlog.get_logger()


def _seeded_store() -> ContactStore:
    store = ContactStore()
    seed(store)
    return store


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level, overrides LOG_LEVEL."
    ),
) -> None:
    """Print the contact reports when no command is given."""
    log.configure(level=log_level)
    if ctx.invoked_subcommand is None:
        report(city=None)


@app.command("report")
def report(
    city: Optional[str] = typer.Option(
        None, "--city", help="City for the second report, defaults to CONTACT_STORE_EXCLUDED_CITY."
    ),
) -> None:
    """List every contact with its addresses, then contacts with an address outside CITY."""
    city = city or settings.app.EXCLUDED_CITY
    with _seeded_store() as store:
        queries = ContactQueries(store)

        typer.echo("All Contacts:")
        for listing in queries.list_all_with_addresses():
            typer.echo(f"- {listing.name} (Addresses: {listing.address_count})")
            for street, address_city in listing.addresses:
                typer.echo(f"    {street}, {address_city}")

        typer.echo(f"\nContacts not in '{city}':")
        for contact in queries.find_contacts_excluding_city(city):
            typer.echo(f"- {contact.name}")
    logger.debug("report_done", city=city)


@app.command("show")
def show(contact_id: int = typer.Argument(..., help="Id of the contact.")) -> None:
    """Show one contact of the seeded store."""
    with _seeded_store() as store:
        contact = store.get_contact(contact_id)
    if contact is None:
        typer.echo(f"No contact with id {contact_id}", err=True)
        raise typer.Exit(1)
    typer.echo(f"{contact.id}: {contact.name}")
    for address in contact.addresses:
        typer.echo(f"    {address.street}, {address.city}")
