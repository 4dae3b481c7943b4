"""Domain port definitions for adapters."""

from __future__ import annotations

from .storage import LocalStore
from .unit_of_work import UnitOfWork

__all__ = [
    "LocalStore",
    "UnitOfWork",
]
