"""Domain models of the store."""
from __future__ import annotations

from . import addresses, contacts
from .addresses import Address
from .contacts import Contact

__all__ = ["Address", "Contact", "addresses", "contacts"]
