"""Base class for typed configuration accessors.

Each subclass reads one top-level section of the merged config (see
:mod:`fogit.core.config.cache`) and exposes its keys as cached properties
with defaults.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .cache import get_cached_config


class BaseDomainConfig(ABC):
    """Accessor for a single config section.

    ``repo_root`` defaults to the auto-detected project root.
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self._repo_root = repo_root
        self._config = get_cached_config(repo_root=repo_root)

    @property
    def repo_root(self) -> Path:
        if self._repo_root:
            return self._repo_root

        from fogit.core.utils.paths import resolve_project_root

        return resolve_project_root()

    @abstractmethod
    def _config_section(self) -> str:
        """Top-level config key, e.g. ``"workflow"``."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """The section's mapping (empty when absent)."""
        return self._config.get(self._config_section(), {}) or {}


__all__ = ["BaseDomainConfig"]
