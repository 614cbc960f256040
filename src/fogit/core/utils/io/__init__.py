"""File I/O helpers (atomic writes, YAML)."""
from __future__ import annotations

from .core import atomic_write, ensure_directory
from .yaml import iter_yaml_files, parse_yaml_string, read_yaml, write_yaml

__all__ = [
    "atomic_write",
    "ensure_directory",
    "read_yaml",
    "write_yaml",
    "parse_yaml_string",
    "iter_yaml_files",
]
