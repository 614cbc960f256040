"""Domain-specific configuration for subprocess timeouts."""
from __future__ import annotations

from functools import cached_property

from fogit.core.exceptions import ConfigError

from ..base import BaseDomainConfig


class TimeoutsConfig(BaseDomainConfig):
    """Accessor for the ``timeouts`` section (seconds)."""

    def _config_section(self) -> str:
        return "timeouts"

    def _seconds(self, key: str) -> float:
        if key not in self.section:
            raise ConfigError(f"timeouts.{key} missing from configuration", context={"key": key})
        return float(self.section[key])

    @cached_property
    def git_operations_seconds(self) -> float:
        return self._seconds("git_operations_seconds")

    @cached_property
    def default_seconds(self) -> float:
        return self._seconds("default_seconds")


__all__ = ["TimeoutsConfig"]
