"""Engine and session factory for the store database."""
from __future__ import annotations

from typing import Any

import sqlalchemy as sa
from sqlalchemy import event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from contact_store import settings

__all__ = ["create_engine", "create_session_factory"]


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(url: str | None = None, *, echo: bool | None = None) -> sa.Engine:
    """Create an engine for `url`, defaulting to `settings.db.URL`.

    In-memory SQLite lives as long as its connection, so such URLs get a
    `StaticPool` that hands the same connection to every session.
    """
    url = url or settings.db.URL
    echo = settings.db.ECHO if echo is None else echo
    sa_url = sa.make_url(url)
    kwargs: dict[str, Any] = {"echo": echo}
    if sa_url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if sa_url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    engine = sa.create_engine(sa_url, **kwargs)
    if sa_url.get_backend_name() == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: sa.Engine) -> sessionmaker[Session]:
    """Session factory bound to `engine`.

    Instances are not expired on commit, the store converts them to DTOs
    right after.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)
