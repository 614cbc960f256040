"""Process logging setup for the CLI.

Library code only ever calls ``logging.getLogger(__name__)`` or accepts an
injected logger; handlers are installed here, once per process.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from fogit.core.utils.io import ensure_directory

_CONFIGURED_KEY: tuple | None = None
_FOGIT_HANDLERS: list[logging.Handler] = []


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    *,
    log_path: Optional[Path],
    level: str = "INFO",
    console: bool = True,
) -> None:
    """Configure stdlib logging for a CLI invocation.

    - A file handler at ``log_path`` records everything at ``level``.
    - When ``console`` is true, WARNING and above also go to stderr. JSON
      mode passes ``console=False`` so output stays machine-readable.

    Idempotent per-process for the same file, level and console setting.
    """
    global _CONFIGURED_KEY

    resolved = str(Path(log_path).resolve()) if log_path is not None else None
    key = (resolved, str(level).upper(), console)
    if _FOGIT_HANDLERS and _CONFIGURED_KEY == key:
        return

    reset_logging()

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    if resolved is not None:
        try:
            ensure_directory(Path(resolved).parent)
            fh = logging.FileHandler(resolved, encoding="utf-8")
        except OSError:
            # Read-only checkouts still get console logging.
            fh = None
        if fh is not None:
            fh.setLevel(_level_from_name(level))
            fh.setFormatter(fmt)
            root.addHandler(fh)
            _FOGIT_HANDLERS.append(fh)

    if console:
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(logging.DEBUG if str(level).upper() == "DEBUG" else logging.WARNING)
        sh.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root.addHandler(sh)
        _FOGIT_HANDLERS.append(sh)
    else:
        # Keep logging's lastResort handler from writing to stderr.
        nh = logging.NullHandler()
        root.addHandler(nh)
        _FOGIT_HANDLERS.append(nh)

    _CONFIGURED_KEY = key


def reset_logging() -> None:
    """Remove handlers installed by :func:`configure_logging`."""
    global _CONFIGURED_KEY
    root = logging.getLogger()
    for h in list(_FOGIT_HANDLERS):
        root.removeHandler(h)
        try:
            h.close()
        except OSError:
            pass
    _FOGIT_HANDLERS.clear()
    _CONFIGURED_KEY = None


__all__ = ["configure_logging", "reset_logging"]
