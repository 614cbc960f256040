"""Feature lookup on the current branch's store."""
from __future__ import annotations

from typing import List, Optional

from fogit.core.config.domains.search import SearchConfig
from fogit.core.exceptions import AmbiguousFeatureError, FeatureNotFoundError

from .models import Feature, FeatureState
from .repository import FeatureRepository
from .search import FeatureMatch, find_similar


def suggest(
    identifier: str,
    features: List[Feature],
    search: Optional[SearchConfig],
) -> List[FeatureMatch]:
    """Fuzzy suggestions for ``identifier``, or none when fuzzy matching is off."""
    if search is None or not search.fuzzy_match:
        return []
    return find_similar(
        identifier,
        features,
        min_similarity=search.min_similarity,
        max_suggestions=search.max_suggestions,
    )


def not_found(identifier: str, suggestions: List[FeatureMatch]) -> FeatureNotFoundError:
    return FeatureNotFoundError(
        f"feature not found: {identifier}",
        identifier=identifier,
        suggestions=suggestions,
        context={"suggestions": [m.to_dict() for m in suggestions]} if suggestions else None,
    )


def matches_identifier(feature: Feature, identifier: str) -> bool:
    """Exact ID or case-insensitive exact name."""
    return feature.id == identifier or feature.name.lower() == identifier.lower()


class FeatureFinder:
    """Resolve identifiers and branch bindings against a :class:`FeatureRepository`."""

    def __init__(self, repository: FeatureRepository, search: Optional[SearchConfig] = None) -> None:
        self.repository = repository
        self.search = search

    def find(self, identifier: str, *, fuzzy: Optional[bool] = None) -> Feature:
        """Find by exact ID, then by case-insensitive exact name.

        ``fuzzy=False`` suppresses suggestions; ``None`` follows config.

        Raises:
            AmbiguousFeatureError: Several features share the name.
            FeatureNotFoundError: Nothing matched (with suggestions when enabled).
        """
        feature = self.repository.get(identifier)
        if feature is not None:
            return feature

        features = self.repository.list()
        wanted = identifier.lower()
        matches = [f for f in features if f.name.lower() == wanted]
        if len(matches) > 1:
            raise AmbiguousFeatureError(
                f"multiple features found with name {identifier!r}, use ID instead",
                context={"identifier": identifier, "ids": [f.id for f in matches]},
            )
        if matches:
            return matches[0]

        search = self.search if fuzzy is not False else None
        raise not_found(identifier, suggest(identifier, features, search))

    def find_all_for_branch(self, branch: str) -> List[Feature]:
        """Open features bound to ``branch``.

        Falls back to the single most recently modified open feature; equal
        timestamps resolve to the lexicographically greatest ID.
        """
        features = self.repository.list(state=FeatureState.OPEN)
        if not features:
            return []

        bound = [f for f in features if f.branch == branch]
        if bound:
            return bound

        most_recent: Optional[Feature] = None
        for feature in features:
            if most_recent is None:
                most_recent = feature
            elif feature.last_modified > most_recent.last_modified:
                most_recent = feature
            elif feature.last_modified == most_recent.last_modified and feature.id > most_recent.id:
                most_recent = feature
        return [most_recent] if most_recent is not None else []


__all__ = ["FeatureFinder", "matches_identifier", "not_found", "suggest"]
