"""Errors raised by record repositories."""
from __future__ import annotations

from typing import Any, Dict, Optional

from fogit.core.exceptions import FogitError


class EntityError(FogitError):
    """A stored record could not be created, found or written."""

    code = "entity_error"

    def __init__(
        self,
        message: str,
        *,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        ctx = dict(context or {})
        if entity_type:
            ctx["entity_type"] = entity_type
        if entity_id:
            ctx["entity_id"] = entity_id
        super().__init__(message, context=ctx)
        self.entity_type = entity_type
        self.entity_id = entity_id


class EntityNotFoundError(EntityError):
    code = "entity_not_found"


class EntityExistsError(EntityError):
    code = "entity_exists"


class PersistenceError(EntityError):
    """Writing a record to disk failed."""

    code = "persistence_error"


__all__ = ["EntityError", "EntityExistsError", "EntityNotFoundError", "PersistenceError"]
