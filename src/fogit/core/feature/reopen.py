"""Start a new version of a closed feature."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from fogit.core.config.domains.workflow import WorkflowConfig
from fogit.core.exceptions import FeatureStateError, GitError
from fogit.core.git import GitRepository
from fogit.core.utils.text import slugify

from .branch import BRANCH_PREFIX
from .models import Feature, FeatureState, VersionIncrement, increment_version
from .repository import FeatureRepository

REOPEN_SLUG_MAX_LENGTH = 50


def reopen_branch_name(name: str, version: str) -> str:
    """``("User Auth", "2")`` -> ``"feature/user-auth-v2"``."""
    slug = slugify(
        name,
        max_length=REOPEN_SLUG_MAX_LENGTH,
        normalize_unicode=True,
        fallback="unnamed",
    )
    return f"{BRANCH_PREFIX}{slug}-v{version}"


@dataclass
class ReopenResult:
    feature: Feature
    previous_version: str
    new_version: str
    branch: str
    branch_created: bool = False
    checked_out: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature": self.feature.summary(),
            "previous_version": self.previous_version,
            "new_version": self.new_version,
            "branch": self.branch,
            "branch_created": self.branch_created,
            "checked_out": self.checked_out,
        }


def reopen_feature(
    repository: FeatureRepository,
    feature: Feature,
    *,
    new_version: Optional[str] = None,
    increment: VersionIncrement | str = VersionIncrement.MINOR,
    workflow: Optional[WorkflowConfig] = None,
    git: Optional[GitRepository] = None,
    logger: Optional[logging.Logger] = None,
) -> ReopenResult:
    """Add and persist a new ``open`` version of a closed ``feature``.

    With ``git`` in branch-per-feature mode the version branch is created
    and checked out; failing that is only a warning.

    Raises:
        FeatureStateError: The feature is not closed or the version exists.
    """
    if feature.state is not FeatureState.CLOSED:
        raise FeatureStateError(
            f"can only reopen closed features ('{feature.name}' is {feature.state})",
            context={"feature_id": feature.id, "state": str(feature.state)},
        )
    workflow = workflow or WorkflowConfig(repo_root=Path(repository.project_root))

    current = feature.current_version_key or "1"
    if new_version is None:
        try:
            new_version = increment_version(current, workflow.version_format, VersionIncrement(increment))
        except ValueError as exc:
            raise FeatureStateError(str(exc), context={"feature_id": feature.id}) from exc

    branch = reopen_branch_name(feature.name, new_version)
    feature.reopen(current, new_version, branch=branch, notes=f"Reopened from version {current}")
    feature.branch = branch
    repository.update(feature)
    result = ReopenResult(feature=feature, previous_version=current, new_version=new_version, branch=branch)

    if git is not None and not workflow.is_trunk_based:
        log = logger or logging.getLogger(__name__)
        try:
            if not git.branch_exists(branch):
                git.create_branch(branch)
                result.branch_created = True
            git.checkout(branch)
            result.checked_out = True
        except GitError as exc:
            log.warning("branch creation issue for %s: %s", branch, exc)
    return result


__all__ = ["ReopenResult", "reopen_branch_name", "reopen_feature"]
