"""In-memory store of contacts and their addresses.

The store owns both tables and is the only place that links an address
to its contact. Callers hand it nested write records and read back frozen
`ContactRead`/`AddressRead` value records.
"""
from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from contact_store.db import create_engine, create_session_factory, orm
from contact_store.domain import Address, Contact, addresses, contacts
from contact_store.exceptions import InvalidArgumentError, NotFoundError

if TYPE_CHECKING:
    from typing import TypeAlias

    import sqlalchemy as sa
    from sqlalchemy.orm import Session, sessionmaker

    from contact_store.dto import MapperBind

    ContactRead: TypeAlias = MapperBind[Contact]
    AddressRead: TypeAlias = MapperBind[Address]
    ContactWrite: TypeAlias = MapperBind[Contact]

__all__ = ["AddressPredicate", "ContactStore", "ContactView"]

logger = structlog.get_logger()

AddressPredicate = Callable[["AddressRead"], bool]
"""Predicate over an `AddressRead` record."""


class ContactView:
    """Lazy, restartable view over every contact of a store.

    Nothing is read until iteration starts, and each iteration reads the
    store afresh, contacts ordered by id with their addresses loaded.
    """

    def __init__(self, store: ContactStore) -> None:
        self._store = store

    def __iter__(self) -> Iterator[ContactRead]:
        with self._store.session() as session:
            statement = (
                select(Contact).options(selectinload(Contact.addresses)).order_by(Contact.id)
            )
            for contact in session.scalars(statement):
                yield contacts.ReadDTO.model_validate(contact)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._store!r})"


class ContactStore:
    """Authoritative collections of contacts and addresses.

    Args:
        engine: Engine to store into, a fresh one for `settings.db.URL` if
            not provided.
    """

    def __init__(self, engine: sa.Engine | None = None) -> None:
        self.engine = engine if engine is not None else create_engine()
        self._session_factory: sessionmaker[Session] = create_session_factory(self.engine)
        self._insert_lock = threading.Lock()
        orm.Base.metadata.create_all(self.engine)

    def __enter__(self) -> ContactStore:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.engine.url!r})"

    def session(self) -> Session:
        """New session on the store database."""
        return self._session_factory()

    def close(self) -> None:
        """Dispose of the engine, an in-memory database is gone after this."""
        self.engine.dispose()

    def insert(self, records: Iterable[ContactWrite | Mapping[str, Any]]) -> list[ContactRead]:
        """Add a batch of contacts and their nested addresses.

        The whole batch is validated before anything is written, then
        committed in a single transaction. Ids are assigned by the database
        and each address is linked to its contact's new id.

        Args:
            records: `ContactWrite` instances or mappings of the same shape.

        Returns:
            The inserted contacts as `ContactRead` records, in input order.

        Raises:
            InvalidArgumentError: If any record is malformed. Nothing is
                inserted in that case.
        """
        if isinstance(records, (Mapping, str, bytes)) or not isinstance(records, Iterable):
            raise InvalidArgumentError(
                f"expected an iterable of records, got {type(records).__name__}"
            )
        batch = [self._validate(index, record) for index, record in enumerate(records)]
        with self._insert_lock, self._session_factory.begin() as session:
            instances = [item.to_mapped() for item in batch]
            session.add_all(instances)
            session.flush()
            inserted = [contacts.ReadDTO.model_validate(instance) for instance in instances]
        logger.info(
            "contacts_inserted",
            contacts=len(inserted),
            addresses=sum(len(contact.addresses) for contact in inserted),
        )
        return inserted

    @staticmethod
    def _validate(index: int, record: Any) -> ContactWrite:
        if isinstance(record, contacts.WriteDTO):
            record = record.model_dump()
        elif not isinstance(record, Mapping):
            raise InvalidArgumentError(
                f"record {index}: expected a mapping, got {type(record).__name__}"
            )
        try:
            return contacts.WriteDTO.model_validate(dict(record))
        except ValidationError as exc:
            logger.warning("insert_rejected", record=index, errors=exc.error_count())
            raise InvalidArgumentError(f"record {index}: {exc}") from exc

    def is_empty(self) -> bool:
        """True if no contact has been inserted."""
        with self.session() as session:
            return session.scalar(select(Contact.id).limit(1)) is None

    def count(self) -> tuple[int, int]:
        """Number of stored contacts and addresses."""
        with self.session() as session:
            contact_count = session.scalar(select(func.count()).select_from(Contact))
            address_count = session.scalar(select(func.count()).select_from(Address))
        return contact_count or 0, address_count or 0

    def all_contacts(self) -> ContactView:
        """Every contact with its addresses, read on iteration."""
        return ContactView(self)

    def find_contacts(self, predicate: AddressPredicate) -> list[ContactRead]:
        """Contacts having at least one address for which `predicate` is true."""
        return [
            contact
            for contact in self.all_contacts()
            if any(predicate(address) for address in contact.addresses)
        ]

    def get_contact(self, contact_id: int) -> ContactRead | None:
        """Contact with id `contact_id`, or `None`."""
        with self.session() as session:
            contact = session.scalar(
                select(Contact)
                .options(selectinload(Contact.addresses))
                .where(Contact.id == contact_id)
            )
            if contact is None:
                return None
            return contacts.ReadDTO.model_validate(contact)

    def get_contact_or_raise(self, contact_id: int) -> ContactRead:
        """Contact with id `contact_id`.

        Raises:
            NotFoundError: If there is no such contact.
        """
        contact = self.get_contact(contact_id)
        if contact is None:
            raise NotFoundError(f"No contact with id {contact_id}")
        return contact

    def contact_of(self, address: AddressRead | Mapping[str, Any]) -> ContactRead:
        """Contact owning `address`, looked up by its `contact_id`."""
        if not isinstance(address, addresses.ReadDTO):
            address = addresses.ReadDTO.model_validate(address)
        return self.get_contact_or_raise(address.contact_id)
