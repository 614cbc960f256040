"""Atomic file writes for feature records and config.

Records are rewritten in place by several commands in a row (commit,
merge, abort), so every write goes through a temp file that replaces the
target only once it is fully on disk.
"""
from __future__ import annotations

import fcntl
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, TextIO


def ensure_directory(path: Path) -> Path:
    """Create ``path`` (and parents) if missing.

    Raises:
        NotADirectoryError: If ``path`` exists as a file.
    """
    path = Path(path)
    if path.exists() and not path.is_dir():
        raise NotADirectoryError(f"path exists but is not a directory: {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(
    path: Path,
    write_fn: Callable[[TextIO], None],
    *,
    mode: Optional[int] = None,
    encoding: str = "utf-8",
) -> None:
    """Write ``path`` via a locked, fsync'd temp file in the same directory.

    ``mode`` sets the final permission bits when given. The temp file never
    outlives a failed write.
    """
    path = Path(path)
    ensure_directory(path.parent)

    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            dir=str(path.parent),
            prefix=f".{path.name}.",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    finally:
        if tmp_path is not None and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass


__all__ = ["atomic_write", "ensure_directory"]
