"""Addresses, the child side of the association."""
from __future__ import annotations

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from contact_store import dto
from contact_store.db import orm

__all__ = ["Address", "ReadDTO", "WriteDTO"]


class Address(orm.Base):
    street: Mapped[str]
    city: Mapped[str]
    contact_id: Mapped[int] = mapped_column(
        ForeignKey("contact.id"), index=True, info=dto.mark(dto.Mark.READ_ONLY)
    )


ReadDTO = dto.factory("AddressRead", Address, purpose=dto.Purpose.READ)
WriteDTO = dto.factory("AddressWrite", Address, purpose=dto.Purpose.WRITE)
