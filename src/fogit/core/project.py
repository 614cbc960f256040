"""Project metadata directory setup (``fogit init``)."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from fogit.core.config.domains.workflow import MODE_BRANCH_PER_FEATURE, MODE_TRUNK_BASED
from fogit.core.exceptions import ConfigError, NotAGitRepositoryError
from fogit.core.git import DEFAULT_TRUNK, GitRepository
from fogit.core.utils.io import ensure_directory, write_yaml
from fogit.core.utils.paths import (
    MERGE_STATE_FILE_NAME,
    get_features_dir,
    get_fogit_dir,
    get_project_config_file,
)

logger = logging.getLogger(__name__)

#: Working files that must never be committed with feature records.
GITIGNORE_ENTRIES = (MERGE_STATE_FILE_NAME, "logs/")


@dataclass
class InitResult:
    root: Path
    created: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": str(self.root),
            "created": [str(p) for p in self.created],
            "skipped": [str(p) for p in self.skipped],
            "config": self.config,
        }


def ensure_gitignore(project_root: Path) -> Path:
    """Make sure ``.fogit/.gitignore`` lists every working-file entry."""
    path = get_fogit_dir(Path(project_root)) / ".gitignore"
    existing: List[str] = []
    if path.exists():
        existing = path.read_text(encoding="utf-8").splitlines()
    missing = [e for e in GITIGNORE_ENTRIES if e not in existing]
    if missing:
        ensure_directory(path.parent)
        lines = existing or ["# fogit working files"]
        path.write_text("\n".join([*lines, *missing]) + "\n", encoding="utf-8")
    return path


def init_project(project_root: Path, *, mode: Optional[str] = None, force: bool = False) -> InitResult:
    """Create ``.fogit/`` with a features directory and a project config.

    The base branch is the detected trunk when ``project_root`` is a git
    repository. An existing config is kept unless ``force``.
    """
    root = Path(project_root)
    mode = mode or MODE_BRANCH_PER_FEATURE
    if mode not in (MODE_BRANCH_PER_FEATURE, MODE_TRUNK_BASED):
        raise ConfigError(f"invalid workflow mode: {mode}", context={"mode": mode})

    result = InitResult(root=root)
    features_dir = get_features_dir(root)
    if features_dir.is_dir():
        result.skipped.append(features_dir)
    else:
        ensure_directory(features_dir)
        result.created.append(features_dir)

    gitignore = ensure_gitignore(root)
    result.created.append(gitignore)

    try:
        base_branch = GitRepository.open(root).trunk_branch()
    except NotAGitRepositoryError:
        logger.warning("not in a git repository; run 'git init' before creating features")
        base_branch = DEFAULT_TRUNK

    config_file = get_project_config_file(root)
    result.config = {"workflow": {"mode": mode, "base_branch": base_branch}}
    if config_file.exists() and not force:
        result.skipped.append(config_file)
    else:
        write_yaml(config_file, result.config)
        result.created.append(config_file)

    from fogit.core.config import clear_all_caches

    clear_all_caches()
    logger.info("initialized fogit in %s", get_fogit_dir(root))
    return result


__all__ = ["GITIGNORE_ENTRIES", "InitResult", "ensure_gitignore", "init_project"]
