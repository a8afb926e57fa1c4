"""Database plumbing: declarative base, engine and session factory."""
from __future__ import annotations

from . import orm
from .engine import create_engine, create_session_factory

__all__ = ["create_engine", "create_session_factory", "orm"]
