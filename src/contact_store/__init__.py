"""In-memory store of contacts and addresses with a small query facade."""
from __future__ import annotations

from . import db, domain, dto, exceptions, log, settings
from .exceptions import ContactStoreError, InvalidArgumentError, NotFoundError
from .queries import ContactListing, ContactQueries
from .seed import SEED_CONTACTS
from .store import ContactStore, ContactView

__all__ = [
    "SEED_CONTACTS",
    "ContactListing",
    "ContactQueries",
    "ContactStore",
    "ContactStoreError",
    "ContactView",
    "InvalidArgumentError",
    "NotFoundError",
    "db",
    "domain",
    "dto",
    "exceptions",
    "log",
    "settings",
]
