"""Domain-specific configuration for CLI logging."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path

from ..base import BaseDomainConfig


class LoggingConfig(BaseDomainConfig):
    """Accessor for the ``logging`` section."""

    def _config_section(self) -> str:
        return "logging"

    @cached_property
    def level(self) -> str:
        return str(self.section.get("level", "INFO")).upper()

    @cached_property
    def log_path(self) -> Path:
        """Absolute log file path; relative values live under ``.fogit/``."""
        from fogit.core.utils.paths import get_fogit_dir

        raw = Path(str(self.section.get("file") or "logs/fogit.log")).expanduser()
        if raw.is_absolute():
            return raw
        return get_fogit_dir(self.repo_root) / raw


__all__ = ["LoggingConfig"]
