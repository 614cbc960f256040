"""Centralized path resolution for fogit.

Layout of the metadata root inside a project::

    <project>/.fogit/
        config.yml          project configuration overrides
        config/*.yaml       optional additional overrides
        features/*.yml      one record per feature
        MERGE_STATE         present only while a conflicted merge is pending
        logs/fogit.log      CLI log file
"""
from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Optional

FOGIT_DIR_NAME = ".fogit"
FEATURES_DIR_NAME = "features"
MERGE_STATE_FILE_NAME = "MERGE_STATE"
PROJECT_CONFIG_FILE_NAME = "config.yml"

#: Git-relative path of the feature store, used when reading other branches' trees.
FEATURES_TREE_PATH = f"{FOGIT_DIR_NAME}/{FEATURES_DIR_NAME}"


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Resolution priority:
    1. ``FOGIT_PROJECT_ROOT`` environment variable
    2. Git repository root via ``git rev-parse --show-toplevel``
    3. Nearest ancestor containing a ``.fogit`` directory
    4. The starting directory itself
    """
    env_root = os.environ.get("FOGIT_PROJECT_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    cwd = Path(start or Path.cwd()).resolve()

    # This must not depend on fogit config (timeouts), because config
    # loading itself needs a resolved project root.
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=str(cwd),
            text=True,
            capture_output=True,
            timeout=5,
        )
        root_str = (result.stdout or "").strip()
        if result.returncode == 0 and root_str:
            return Path(root_str).resolve()
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass

    for candidate in (cwd, *cwd.parents):
        if (candidate / FOGIT_DIR_NAME).is_dir():
            return candidate
    return cwd


def get_fogit_dir(repo_root: Path) -> Path:
    return Path(repo_root) / FOGIT_DIR_NAME


def get_features_dir(repo_root: Path) -> Path:
    return get_fogit_dir(repo_root) / FEATURES_DIR_NAME


def get_merge_state_path(repo_root: Path) -> Path:
    return get_fogit_dir(repo_root) / MERGE_STATE_FILE_NAME


def get_project_config_file(repo_root: Path) -> Path:
    return get_fogit_dir(repo_root) / PROJECT_CONFIG_FILE_NAME


def get_user_config_dir() -> Path:
    """Return the user config directory (``FOGIT_USER_CONFIG_DIR`` or ``~/.fogit``).

    Relative values are treated as relative to the user's home directory.
    """
    raw = os.environ.get("FOGIT_USER_CONFIG_DIR") or FOGIT_DIR_NAME
    p = Path(raw).expanduser()
    if not p.is_absolute():
        p = Path.home() / p
    return p.resolve()


__all__ = [
    "FOGIT_DIR_NAME",
    "FEATURES_DIR_NAME",
    "FEATURES_TREE_PATH",
    "MERGE_STATE_FILE_NAME",
    "PROJECT_CONFIG_FILE_NAME",
    "resolve_project_root",
    "get_fogit_dir",
    "get_features_dir",
    "get_merge_state_path",
    "get_project_config_file",
    "get_user_config_dir",
]
