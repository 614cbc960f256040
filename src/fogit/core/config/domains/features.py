"""Domain-specific configuration for new feature records."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig


class FeaturesConfig(BaseDomainConfig):
    """Accessor for the ``features`` section."""

    def _config_section(self) -> str:
        return "features"

    @cached_property
    def default_priority(self) -> str:
        return str(self.section.get("default_priority") or "medium")


__all__ = ["FeaturesConfig"]
