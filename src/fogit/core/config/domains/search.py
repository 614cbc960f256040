"""Domain-specific configuration for fuzzy feature search."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class SearchConfig(BaseDomainConfig):
    """Accessor for the ``feature_search`` section."""

    def _config_section(self) -> str:
        return "feature_search"

    @cached_property
    def fuzzy_match(self) -> bool:
        return bool(self.section.get("fuzzy_match", True))

    @cached_property
    def min_similarity(self) -> float:
        """Minimum score (0-100) for a suggestion."""
        return float(self.section.get("min_similarity", 60))

    @cached_property
    def max_suggestions(self) -> int:
        return int(self.section.get("max_suggestions", 5))


__all__ = ["SearchConfig"]
