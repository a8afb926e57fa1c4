"""Pytest configuration and fixtures."""
from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog

from contact_store.db import create_engine
from contact_store.queries import ContactQueries
from contact_store.seed import seed
from contact_store.store import ContactStore


@pytest.fixture(name="store")
def fx_store() -> Iterator[ContactStore]:
    """Empty store on its own in-memory database."""
    with ContactStore(create_engine("sqlite://", echo=False)) as store:
        yield store


@pytest.fixture(name="seeded_store")
def fx_seeded_store(store: ContactStore) -> ContactStore:
    """Store holding the canonical seed data."""
    seed(store)
    return store


@pytest.fixture(name="queries")
def fx_queries(seeded_store: ContactStore) -> ContactQueries:
    return ContactQueries(seeded_store)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo `log.configure()` calls made by a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
