"""Durable record of a merge that stopped on conflicts.

The file ``.fogit/MERGE_STATE`` exists only between a conflicted merge and
its ``--continue`` or ``--abort``; its presence is the sole signal that a
fogit merge is pending.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from fogit.core.exceptions import FogitError
from fogit.core.utils.io import read_yaml, write_yaml
from fogit.core.utils.paths import get_merge_state_path

logger = logging.getLogger(__name__)

MERGE_STATE_FILE_MODE = 0o600


class MergeStateError(FogitError):
    """Raised when the merge state file cannot be read or written."""

    code = "merge_state_error"


@dataclass
class MergeState:
    feature_branch: str
    base_branch: str
    feature_ids: List[str] = field(default_factory=list)
    no_delete: bool = False
    squash: bool = False
    conflict_files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "feature_branch": self.feature_branch,
            "base_branch": self.base_branch,
            "feature_ids": list(self.feature_ids),
            "no_delete": self.no_delete,
            "squash": self.squash,
        }
        if self.conflict_files:
            data["conflict_files"] = list(self.conflict_files)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MergeState":
        return cls(
            feature_branch=str(data.get("feature_branch") or ""),
            base_branch=str(data.get("base_branch") or ""),
            feature_ids=[str(i) for i in data.get("feature_ids") or []],
            no_delete=bool(data.get("no_delete", False)),
            squash=bool(data.get("squash", False)),
            conflict_files=[str(p) for p in data.get("conflict_files") or []],
        )


class MergeStateStore:
    """load / save / clear for the single merge state file of a project."""

    def __init__(self, project_root: Path) -> None:
        self.project_root = Path(project_root)
        self.path = get_merge_state_path(self.project_root)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[MergeState]:
        """Return the pending state, or None when no merge is pending.

        Raises:
            MergeStateError: If the file exists but cannot be parsed.
        """
        if not self.exists():
            return None
        try:
            data = read_yaml(self.path, default=None, raise_on_error=True)
        except (OSError, yaml.YAMLError) as exc:
            raise MergeStateError(f"failed to read merge state: {exc}", context={"path": str(self.path)}) from exc
        if not isinstance(data, dict):
            raise MergeStateError("failed to parse merge state", context={"path": str(self.path)})
        return MergeState.from_dict(data)

    def save(self, state: MergeState) -> None:
        from fogit.core.project import ensure_gitignore

        try:
            ensure_gitignore(self.project_root)
            write_yaml(self.path, state.to_dict(), mode=MERGE_STATE_FILE_MODE)
        except OSError as exc:
            raise MergeStateError(f"failed to save merge state: {exc}", context={"path": str(self.path)}) from exc
        logger.debug("saved merge state for %s", state.feature_branch)

    def clear(self) -> None:
        """Remove the state file; missing is fine."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise MergeStateError(f"failed to clear merge state: {exc}", context={"path": str(self.path)}) from exc


__all__ = ["MergeState", "MergeStateError", "MergeStateStore", "MERGE_STATE_FILE_MODE"]
