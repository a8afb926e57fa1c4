"""Exceptions raised by the contact store."""
from __future__ import annotations

__all__ = [
    "ContactStoreError",
    "InvalidArgumentError",
    "NotFoundError",
]


class ContactStoreError(Exception):
    """Base exception type for the lib's custom exception types."""


class InvalidArgumentError(ContactStoreError, ValueError):
    """A record handed to the store is malformed.

    Raised for the whole batch: nothing has been written when this
    propagates out of `ContactStore.insert()`.
    """


class NotFoundError(ContactStoreError, LookupError):
    """No record matches the lookup."""
