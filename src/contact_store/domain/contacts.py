"""Contacts, the parent side of the association."""
from __future__ import annotations

from sqlalchemy.orm import Mapped, relationship

from contact_store import dto
from contact_store.db import orm

from .addresses import Address

__all__ = ["Contact", "ReadDTO", "WriteDTO"]


class Contact(orm.Base):
    """A named contact owning an ordered list of addresses.

    The association is one-directional: addresses only carry the
    `contact_id` of their owner.
    """

    name: Mapped[str]
    addresses: Mapped[list[Address]] = relationship(
        Address, order_by=Address.id, cascade="all, delete-orphan", lazy="raise"
    )


ReadDTO = dto.factory("ContactRead", Contact, purpose=dto.Purpose.READ)
WriteDTO = dto.factory("ContactWrite", Contact, purpose=dto.Purpose.WRITE)
