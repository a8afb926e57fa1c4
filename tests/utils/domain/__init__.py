"""Example domain objects for testing."""
from __future__ import annotations

from . import children, parents

__all__ = ["children", "parents"]
