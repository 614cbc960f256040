"""Centralized configuration caching.

Provides a single source of truth for loaded configuration across all domain
configs. Cache keys include the repo root, a fingerprint of ``FOGIT_*``
environment overrides and the mtimes of project/user config files, so
long-running processes and test suites never see stale values.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        from fogit.core.utils.paths import resolve_project_root

        return resolve_project_root()
    return Path(repo_root).expanduser().resolve()


def _fingerprint_files(paths: List[Path]) -> List[Tuple[str, int, int]]:
    files: List[Tuple[str, int, int]] = []
    for p in paths:
        try:
            st = p.stat()
            files.append((str(p), int(st.st_mtime_ns), int(st.st_size)))
        except OSError:
            continue
    return files


def _cache_key(repo_root: Path) -> str:
    from fogit.core.config.manager import ConfigManager, ENV_PREFIX

    env_items = sorted((k, os.environ.get(k, "")) for k in os.environ if k.startswith(ENV_PREFIX))
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    cfg_files = _fingerprint_files(ConfigManager(repo_root).override_files())
    cfg_fp = hashlib.sha256(repr(cfg_files).encode("utf-8")).hexdigest()[:12]
    return f"{repo_root}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(repo_root: Optional[Path] = None, validate: bool = False) -> Dict[str, Any]:
    """Merged configuration for ``repo_root``, loaded once per fingerprint.

    Treat the result as immutable; every accessor shares the same dict.
    """
    from fogit.core.config.manager import ConfigManager

    normalized_root = _normalize_repo_root(repo_root)
    key = _cache_key(normalized_root)
    if key not in _config_cache:
        manager = ConfigManager(repo_root=normalized_root)
        _config_cache[key] = manager.load_config_uncached(validate=validate)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Clear the configuration cache (call after writing config files)."""
    _config_cache.clear()


__all__ = ["clear_all_caches", "get_cached_config"]
