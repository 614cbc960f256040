"""
fogit configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonschema

from fogit.core.exceptions import ConfigError
from fogit.core.utils.io import iter_yaml_files, read_yaml, write_yaml
from fogit.core.utils.merge import deep_merge
from fogit.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "FOGIT_"
SCHEMA_FILE = "config.schema.yaml"

_MISSING = object()


class ConfigManager:
    """Load, merge, and validate fogit configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: ``FOGIT_<SECTION>__<KEY>`` (double underscore
       separates path segments, e.g. ``FOGIT_WORKFLOW__MODE=trunk-based``)
    2. Project config: ``.fogit/config.yml`` then ``.fogit/config/*.yaml``
    3. User config: ``~/.fogit/config/*.yaml``
    4. Bundled defaults: ``fogit.data/config/*.yaml``
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        from fogit.core.utils.paths import (
            get_fogit_dir,
            get_project_config_file,
            get_user_config_dir,
            resolve_project_root,
        )

        self.repo_root = Path(repo_root) if repo_root is not None else resolve_project_root()

        # Bundled defaults from fogit.data package (always available)
        self.core_config_dir = get_data_path("config")
        self.user_config_dir = get_user_config_dir() / "config"
        self.project_config_file = get_project_config_file(self.repo_root)
        self.project_config_dir = get_fogit_dir(self.repo_root) / "config"
        self.schemas_dir = get_data_path("schemas")

    # ---------- Loading ----------

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except Exception as exc:
            raise ConfigError(f"failed to read config file {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"config file {path} must contain a mapping", context={"path": str(path)})
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    def override_files(self) -> List[Path]:
        """Return every non-bundled config file that currently exists."""
        files = list(iter_yaml_files(self.user_config_dir))
        if self.project_config_file.exists():
            files.append(self.project_config_file)
        files.extend(iter_yaml_files(self.project_config_dir))
        return files

    def load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from every source (UNCACHED)."""
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.user_config_dir, cfg)
        if self.project_config_file.exists():
            cfg = deep_merge(cfg, self.load_yaml(self.project_config_file))
        cfg = self._load_directory(self.project_config_dir, cfg)
        self.apply_env_overrides(cfg)

        if validate:
            self.validate_schema(cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load configuration using the centralized cache.

        Returned dict should be treated as immutable.
        """
        from fogit.core.config.cache import get_cached_config

        cfg = get_cached_config(repo_root=self.repo_root, validate=False)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def validate_schema(self, config: Dict[str, Any]) -> None:
        schema = read_yaml(self.schemas_dir / SCHEMA_FILE, default=None, raise_on_error=True)
        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.ValidationError as exc:
            location = ".".join(str(p) for p in exc.absolute_path) or "<root>"
            raise ConfigError(
                f"invalid configuration at {location}: {exc.message}",
                context={"key": location},
            ) from exc

    # ---------- Environment overrides ----------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return None
        return None

    def coerce_value(self, value: str) -> Any:
        """Coerce a string from the environment or CLI to bool/int/float/JSON."""
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            # Single-underscore names (FOGIT_PROJECT_ROOT, ...) are process
            # settings, not config paths.
            if "__" not in raw:
                continue
            segs = [s.lower() for s in raw.split("__")]
            if any(s == "" for s in segs):
                logger.warning("ignoring malformed config override %s", key)
                continue
            yield segs, self.coerce_value(os.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            set_nested(cfg, path, typed_value)

    # ---------- Accessors ----------

    def get(self, dotted_key: str, default: Any = _MISSING) -> Any:
        """Return the merged value at ``dotted_key`` (e.g. ``workflow.mode``)."""
        cur: Any = self.load_config(validate=False)
        for part in dotted_key.split("."):
            if not isinstance(cur, dict) or part not in cur:
                if default is _MISSING:
                    raise ConfigError(f"unknown config key: {dotted_key}", context={"key": dotted_key})
                return default
            cur = cur[part]
        return cur

    def set_project_value(self, dotted_key: str, raw_value: str) -> Any:
        """Persist ``dotted_key = raw_value`` to ``.fogit/config.yml``.

        The resulting merged configuration must validate; nothing is written
        otherwise. Returns the coerced value.
        """
        from fogit.core.config.cache import clear_all_caches

        path = [p for p in dotted_key.split(".") if p]
        if not path:
            raise ConfigError("config key must not be empty")

        value = self.coerce_value(raw_value)
        project_cfg = self.load_yaml(self.project_config_file) if self.project_config_file.exists() else {}
        set_nested(project_cfg, path, value)

        merged = deep_merge(self.load_config_uncached(validate=False), project_cfg)
        self.validate_schema(merged)

        write_yaml(self.project_config_file, project_cfg)
        clear_all_caches()
        logger.info("config %s set to %r", dotted_key, value)
        return value


def set_nested(root: Dict[str, Any], path: List[str], value: Any) -> None:
    """Assign ``value`` at ``path`` inside ``root``, creating mappings as needed."""
    cur = root
    for part in path[:-1]:
        nxt = cur.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[part] = nxt
        cur = nxt
    cur[path[-1]] = value


__all__ = ["ConfigManager", "ENV_PREFIX", "set_nested"]
