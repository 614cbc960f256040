"""Layered configuration: bundled defaults, user, project and env overrides."""
from __future__ import annotations

from .cache import clear_all_caches, get_cached_config
from .manager import ConfigManager

__all__ = ["ConfigManager", "clear_all_caches", "get_cached_config"]
