"""Read shapes used by the reports, on top of `ContactStore`."""
from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from contact_store.store import ContactRead, ContactStore

__all__ = ["ContactListing", "ContactQueries"]


class ContactListing(NamedTuple):
    """A contact projected for display."""

    name: str
    address_count: int
    addresses: list[tuple[str, str]]
    """`(street, city)` pairs in insertion order."""


class ContactQueries:
    """Query facade over a contact store."""

    def __init__(self, store: ContactStore) -> None:
        self.store = store

    def list_all_with_addresses(self) -> list[ContactListing]:
        """Every contact in id order, with its addresses."""
        return [
            ContactListing(
                name=contact.name,
                address_count=len(contact.addresses),
                addresses=[(address.street, address.city) for address in contact.addresses],
            )
            for contact in self.store.all_contacts()
        ]

    def find_contacts_excluding_city(self, city: str) -> list[ContactRead]:
        """Contacts with at least one address outside `city`.

        The match is existential: a contact that also has an address in
        `city` is included, only contacts whose every address is in `city`
        (or that have no address at all) are left out. Cities are compared
        exactly, case included.
        """
        return self.store.find_contacts(lambda address: address.city != city)
