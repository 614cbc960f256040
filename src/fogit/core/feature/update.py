"""Edit a feature's descriptive fields."""
from __future__ import annotations

from typing import Iterable, List, Optional

from .models import PRIORITY_METADATA_KEY, VALID_PRIORITIES, Feature
from .repository import FeatureRepository


def update_feature(
    repository: FeatureRepository,
    feature: Feature,
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
    priority: Optional[str] = None,
    add_tags: Iterable[str] = (),
    remove_tags: Iterable[str] = (),
) -> List[str]:
    """Apply the given changes and persist when anything changed.

    ``None`` leaves a field alone; an empty ``description`` clears it.
    Any change advances ``modified_at``. Returns the names of the fields
    that changed.

    Raises:
        ValueError: Invalid priority or blank name.
    """
    changed: List[str] = []

    if name is not None:
        if not name.strip():
            raise ValueError("feature name cannot be empty")
        if name.strip() != feature.name:
            feature.name = name.strip()
            changed.append("name")

    if description is not None and description != feature.description:
        feature.description = description
        changed.append("description")

    if priority and priority != feature.priority:
        if priority not in VALID_PRIORITIES:
            raise ValueError(f"invalid priority: {priority}")
        feature.metadata[PRIORITY_METADATA_KEY] = priority
        changed.append("priority")

    tags_before = list(feature.tags)
    for tag in add_tags:
        feature.add_tag(tag)
    drop = set(remove_tags)
    feature.tags = [t for t in feature.tags if t not in drop]
    if feature.tags != tags_before:
        changed.append("tags")

    if changed:
        feature.touch()
        repository.update(feature)
    return changed


__all__ = ["update_feature"]
