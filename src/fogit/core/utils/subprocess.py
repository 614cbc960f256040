"""Subprocess helpers bounded by the configured ``timeouts`` section.

Commands are always argument lists; nothing goes through a shell.
"""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from time import perf_counter
from typing import Any, MutableMapping, Optional, Sequence

from fogit.core.config.domains.timeouts import TimeoutsConfig

logger = logging.getLogger(__name__)


def _is_git(cmd: Sequence[str]) -> bool:
    return bool(cmd) and Path(str(cmd[0])).name == "git"


def configured_timeout(cmd: Sequence[str], cwd: Path | str | None = None) -> float:
    """``timeouts.git_operations_seconds`` for git, else ``timeouts.default_seconds``."""
    config = TimeoutsConfig(repo_root=Path(cwd).resolve() if cwd is not None else None)
    return config.git_operations_seconds if _is_git(cmd) else config.default_seconds


def run_with_timeout(cmd: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess:
    """``subprocess.run`` with the configured timeout unless ``timeout=`` is given.

    Raises:
        subprocess.TimeoutExpired: When the command exceeds its timeout.
    """
    argv = [str(part) for part in cmd]
    timeout = kwargs.pop("timeout", None)
    if timeout is None:
        timeout = configured_timeout(argv, cwd=kwargs.get("cwd"))

    start = perf_counter()
    try:
        result = subprocess.run(argv, timeout=timeout, **kwargs)
    except subprocess.TimeoutExpired:
        logger.warning("command timed out after %.1fs: %s", timeout, " ".join(argv))
        raise

    logger.debug(
        "ran %s (rc=%s, %.1fms)",
        " ".join(argv),
        result.returncode,
        (perf_counter() - start) * 1000.0,
    )
    return result


def run_git_command(
    cmd: Sequence[str],
    *,
    cwd: Optional[Path | str] = None,
    env: Optional[MutableMapping[str, str]] = None,
    capture_output: bool = False,
) -> subprocess.CompletedProcess:
    """Run a git command as UTF-8 text, never raising on a non-zero exit."""
    return run_with_timeout(
        cmd,
        cwd=str(cwd) if cwd is not None else None,
        env=env,
        capture_output=capture_output,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )


__all__ = ["configured_timeout", "run_git_command", "run_with_timeout"]
