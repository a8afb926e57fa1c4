"""Application ORM configuration."""
from __future__ import annotations

from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

from contact_store import dto

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
"""Templates for automated constraint name generation."""


class Base(DeclarativeBase):
    """Base for all SQLAlchemy declarative models.

    Every table gets an integer primary key. The key is read-only on DTOs and
    is never reused by SQLite once assigned (`AUTOINCREMENT`).
    """

    metadata = MetaData(naming_convention=convention)

    id: Mapped[int] = mapped_column(primary_key=True, info=dto.mark(dto.Mark.READ_ONLY))
    """Primary key column, assigned by the database on insert."""

    # noinspection PyMethodParameters
    @declared_attr.directive
    def __tablename__(cls) -> str:  # pylint: disable=no-self-argument
        """Infer table name from class name."""
        return cls.__name__.lower()

    # noinspection PyMethodParameters
    @declared_attr.directive
    def __table_args__(cls) -> dict[str, Any]:  # pylint: disable=no-self-argument
        return {"sqlite_autoincrement": True}
