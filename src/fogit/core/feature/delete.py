"""Delete a feature and the relationships other features hold to it."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fogit.core.entity import EntityNotFoundError

from .models import Feature
from .repository import FeatureRepository


@dataclass
class DeleteResult:
    feature: Feature
    cleaned_up: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "deleted": self.feature.summary(),
            "cleaned_up_relationships": len(self.cleaned_up),
            "updated_features": list(self.cleaned_up),
        }


def delete_feature(
    repository: FeatureRepository,
    feature: Feature,
    *,
    cleanup_relationships: bool = True,
    logger: Optional[logging.Logger] = None,
) -> DeleteResult:
    """Remove ``feature``'s record.

    Incoming relationships are removed first (unless disabled) so no record
    is left pointing at a missing ID. ``cleaned_up`` lists the IDs of the
    features that were rewritten.

    Raises:
        EntityNotFoundError: The record is already gone.
    """
    log = logger or logging.getLogger(__name__)
    result = DeleteResult(feature=feature)

    if cleanup_relationships:
        for other in repository.list():
            if other.id == feature.id:
                continue
            kept = [r for r in other.relationships if r.target_id != feature.id]
            if len(kept) == len(other.relationships):
                continue
            other.relationships = kept
            repository.update(other)
            result.cleaned_up.append(other.id)

    if not repository.delete(feature.id):
        raise EntityNotFoundError(
            f"Feature {feature.id} not found",
            entity_type=repository.entity_type,
            entity_id=feature.id,
        )
    log.info("deleted feature %s (%d incoming relationship(s) removed)", feature.id, len(result.cleaned_up))
    return result


__all__ = ["DeleteResult", "delete_feature"]
