"""Canonical seed data."""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from contact_store.store import ContactStore

__all__ = ["SEED_CONTACTS", "SeedContact", "as_records", "seed"]

logger = structlog.get_logger()

SeedContact = tuple[str, Sequence[tuple[str, str]]]

SEED_CONTACTS: tuple[SeedContact, ...] = (
    ("Alice Smith", [("123 Main St", "Springfield"), ("456 Oak Ave", "Shelbyville")]),
    ("Bob Johnson", [("789 Pine Rd", "Springfield")]),
    ("Carol White", [("101 Maple St", "Ogdenville")]),
    ("David Martinez", [("234 Elm St", "Springfield"), ("567 Cedar Ln", "Capital City")]),
    ("Emma Davis", [("890 Birch Ave", "Shelbyville")]),
    ("Frank Wilson", [("321 Willow Dr", "Ogdenville"), ("654 Spruce Way", "Springfield")]),
    ("Grace Lee", [("987 Aspen Ct", "Capital City")]),
    (
        "Henry Brown",
        [
            ("147 Poplar St", "Springfield"),
            ("258 Cherry Blvd", "Shelbyville"),
            ("369 Walnut Rd", "Ogdenville"),
        ],
    ),
    ("Iris Chen", [("741 Magnolia Ave", "Capital City")]),
    ("Jack Thompson", [("852 Sycamore Ln", "Springfield")]),
    ("Kelly Anderson", [("963 Hickory Dr", "Shelbyville"), ("159 Redwood Way", "Capital City")]),
    ("Liam Garcia", [("753 Cypress Ct", "Ogdenville")]),
    ("Maya Patel", [("486 Beech St", "Springfield"), ("297 Dogwood Ave", "Shelbyville")]),
)
"""`(name, [(street, city), ...])` for each contact."""


def as_records(seed_contacts: Iterable[SeedContact]) -> list[dict]:
    """Nested mappings accepted by `ContactStore.insert()`."""
    return [
        {
            "name": name,
            "addresses": [{"street": street, "city": city} for street, city in address_pairs],
        }
        for name, address_pairs in seed_contacts
    ]


def seed(store: ContactStore, seed_contacts: Iterable[SeedContact] = SEED_CONTACTS) -> bool:
    """Insert `seed_contacts` unless the store already holds contacts.

    Returns:
        Whether anything was inserted.
    """
    if not store.is_empty():
        logger.info("seed_skipped", reason="store not empty")
        return False
    store.insert(as_records(seed_contacts))
    return True
