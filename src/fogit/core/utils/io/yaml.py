"""YAML reading and writing for feature records, config and merge state."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .core import atomic_write


# Multiline strings (feature descriptions, notes) use literal block style (|).
def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


yaml.add_representer(str, _str_representer, Dumper=yaml.SafeDumper)


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Load ``path`` under a shared lock.

    Missing, empty or unparsable files give ``default`` unless
    ``raise_on_error`` is set.
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"file not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                data = yaml.safe_load(f)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default
    return data if data is not None else default


def write_yaml(path: Path, data: Any, *, mode: Optional[int] = None) -> None:
    """Atomically write ``data`` with sorted keys."""

    def _writer(f) -> None:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=True, allow_unicode=True)

    atomic_write(Path(path), _writer, mode=mode)


def parse_yaml_string(content: str, default: Any = None) -> Any:
    """Parse YAML text (e.g. a record read from another branch)."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError:
        return default
    return data if data is not None else default


def iter_yaml_files(dir_path: Path) -> List[Path]:
    """``*.yaml`` and ``*.yml`` files in ``dir_path`` sorted by stem.

    When both ``<name>.yaml`` and ``<name>.yml`` exist only the ``.yaml``
    file is returned.
    """
    d = Path(dir_path)
    if not d.is_dir():
        return []
    by_stem = {p.stem: p for p in d.glob("*.yml")}
    by_stem.update({p.stem: p for p in d.glob("*.yaml")})
    return [by_stem[stem] for stem in sorted(by_stem)]


__all__ = ["iter_yaml_files", "parse_yaml_string", "read_yaml", "write_yaml"]
