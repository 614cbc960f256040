"""Generic record persistence building blocks."""
from __future__ import annotations

from .exceptions import EntityError, EntityExistsError, EntityNotFoundError, PersistenceError
from .repository import BaseRepository

__all__ = [
    "BaseRepository",
    "EntityError",
    "EntityExistsError",
    "EntityNotFoundError",
    "PersistenceError",
]
