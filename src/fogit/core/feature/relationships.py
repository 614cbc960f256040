"""Relationship graph over feature records.

The graph is an adjacency list keyed by feature ID::

    {source_id: [(type, target_id), ...]}

Features hold relationships by target ID only, so the graph never forms
object reference cycles; traversal is iterative with a visited set.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from fogit.core.exceptions import RelationshipError

from .models import Feature, Relationship
from .repository import FeatureRepository

logger = logging.getLogger(__name__)

DEPENDS_ON = "depends-on"
BLOCKED_BY = "blocked-by"
CONTAINED_BY = "contained-by"

#: Relationship types meaning "the source needs the target".
DEPENDENCY_TYPES: Tuple[str, ...] = (DEPENDS_ON, BLOCKED_BY)

#: Known relationship types. Structural and workflow types must stay acyclic;
#: informational ones may loop.
ACYCLIC_TYPES = frozenset(
    {
        DEPENDS_ON,
        "required-by",
        "contains",
        CONTAINED_BY,
        "implements",
        "implemented-by",
        "replaces",
        "replaced-by",
        "blocks",
        BLOCKED_BY,
    }
)
RELATIONSHIP_TYPES = ACYCLIC_TYPES | {
    "references",
    "referenced-by",
    "related-to",
    "conflicts-with",
    "tests",
    "tested-by",
}

Edge = Tuple[str, str]


class FeatureGraph(Protocol):
    """What the merge engine needs to know about dependents."""

    def open_dependents(
        self, feature_id: str, types: Optional[Sequence[str]] = None
    ) -> List[Feature]:
        ...


def _type_matches(rel_type: str, types: Optional[Iterable[str]]) -> bool:
    return types is None or rel_type in types


class RelationshipGraph:
    def __init__(self, features: Iterable[Feature]) -> None:
        self.features: Dict[str, Feature] = {}
        self.edges: Dict[str, List[Edge]] = {}
        for feature in features:
            self.features[feature.id] = feature
            self.edges[feature.id] = [(r.type, r.target_id) for r in feature.relationships]

    def outgoing(self, feature_id: str, types: Optional[Sequence[str]] = None) -> List[str]:
        return [t for rel_type, t in self.edges.get(feature_id, []) if _type_matches(rel_type, types)]

    def would_create_cycle(
        self, source_id: str, target_id: str, types: Optional[Sequence[str]] = None
    ) -> bool:
        """True if adding ``source -> target`` closes a loop.

        That is the case when ``source`` is already reachable from ``target``.
        """
        if source_id == target_id:
            return True
        stack = [target_id]
        visited: Set[str] = set()
        while stack:
            node = stack.pop()
            if node == source_id:
                return True
            if node in visited:
                continue
            visited.add(node)
            stack.extend(n for n in self.outgoing(node, types) if n not in visited)
        return False

    def dependents(self, feature_id: str, types: Optional[Sequence[str]] = DEPENDENCY_TYPES) -> List[Feature]:
        """Features with a relationship of ``types`` pointing at ``feature_id``."""
        found: List[Feature] = []
        for source_id, edges in self.edges.items():
            if source_id == feature_id:
                continue
            if any(t == feature_id and _type_matches(rel_type, types) for rel_type, t in edges):
                found.append(self.features[source_id])
        return found

    def open_dependents(
        self, feature_id: str, types: Optional[Sequence[str]] = DEPENDENCY_TYPES
    ) -> List[Feature]:
        return [f for f in self.dependents(feature_id, types) if not f.is_closed]


def link_features(
    repository: FeatureRepository,
    source: Feature,
    target: Feature,
    rel_type: str,
    *,
    description: str = "",
) -> Relationship:
    """Add a ``rel_type`` relationship from ``source`` to ``target`` and persist it.

    Acyclic types are checked against the stored graph for that type, so a
    chain like ``a depends-on b depends-on a`` is refused.

    Raises:
        RelationshipError: Unknown type, self-reference, duplicate or cycle.
    """
    if rel_type not in RELATIONSHIP_TYPES:
        raise RelationshipError(
            f"unknown relationship type: {rel_type}",
            context={"type": rel_type, "valid_types": sorted(RELATIONSHIP_TYPES)},
        )
    context = {"source_id": source.id, "target_id": target.id, "type": rel_type}
    if rel_type in ACYCLIC_TYPES:
        graph = RelationshipGraph(repository.list())
        if graph.would_create_cycle(source.id, target.id, (rel_type,)):
            raise RelationshipError(
                f"cannot link '{source.name}' {rel_type} '{target.name}': it would create a cycle",
                context=context,
            )

    rel = Relationship(
        type=rel_type,
        target_id=target.id,
        target_name=target.name,
        description=description,
    )
    try:
        source.add_relationship(rel)
    except ValueError as exc:
        raise RelationshipError(str(exc), context=context) from exc
    repository.update(source)
    logger.info("linked %s %s %s", source.id, rel_type, target.id)
    return rel


def unlink_features(
    repository: FeatureRepository,
    source: Feature,
    target_id: str,
    rel_type: Optional[str] = None,
) -> List[Relationship]:
    """Remove relationships from ``source`` to ``target_id`` (all types unless given).

    Raises:
        RelationshipError: Nothing matched.
    """
    removed = [
        r for r in source.relationships
        if r.target_id == target_id and (rel_type is None or r.type == rel_type)
    ]
    if not removed:
        raise RelationshipError(
            f"'{source.name}' has no matching relationship to {target_id}",
            context={"source_id": source.id, "target_id": target_id, "type": rel_type},
        )
    source.relationships = [r for r in source.relationships if r not in removed]
    source.touch()
    repository.update(source)
    return removed


__all__ = [
    "ACYCLIC_TYPES",
    "BLOCKED_BY",
    "CONTAINED_BY",
    "DEPENDENCY_TYPES",
    "DEPENDS_ON",
    "FeatureGraph",
    "RELATIONSHIP_TYPES",
    "RelationshipGraph",
    "link_features",
    "unlink_features",
]
