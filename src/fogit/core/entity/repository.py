"""Base repository for stored records.

Subclasses implement the ``_do_*`` hooks for their storage; the public
methods add the existence checks shared by every record type.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Protocol, TypeVar

from .exceptions import EntityExistsError, EntityNotFoundError


class Entity(Protocol):
    id: str


T = TypeVar("T", bound=Entity)


class BaseRepository(ABC, Generic[T]):
    """CRUD over records of one type, keyed by ``id``."""

    entity_type: str = "entity"

    def create(self, entity: T) -> T:
        """Persist a new record.

        Raises:
            EntityExistsError: A record with the same ID is already stored.
            PersistenceError: The write failed.
        """
        if self.exists(entity.id):
            raise EntityExistsError(
                f"{self.entity_type.title()} {entity.id} already exists",
                entity_type=self.entity_type,
                entity_id=entity.id,
            )
        return self._do_create(entity)

    def exists(self, entity_id: str) -> bool:
        return self._do_get(entity_id) is not None

    def get(self, entity_id: str) -> Optional[T]:
        return self._do_get(entity_id)

    def update(self, entity: T) -> None:
        """Rewrite a stored record.

        Raises:
            EntityNotFoundError: The record was never created.
        """
        if not self.exists(entity.id):
            raise EntityNotFoundError(
                f"{self.entity_type.title()} {entity.id} not found",
                entity_type=self.entity_type,
                entity_id=entity.id,
            )
        self._do_update(entity)

    def delete(self, entity_id: str) -> bool:
        """Remove a record; False when it did not exist."""
        return self._do_delete(entity_id)

    @abstractmethod
    def _do_create(self, entity: T) -> T:
        ...

    @abstractmethod
    def _do_get(self, entity_id: str) -> Optional[T]:
        ...

    @abstractmethod
    def _do_update(self, entity: T) -> None:
        ...

    @abstractmethod
    def _do_delete(self, entity_id: str) -> bool:
        ...

    @abstractmethod
    def _do_list_all(self) -> List[T]:
        ...


__all__ = ["BaseRepository", "Entity"]
