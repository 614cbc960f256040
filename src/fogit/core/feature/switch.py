"""Move the working tree to a feature's branch."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from fogit.core.config.domains.search import SearchConfig
from fogit.core.config.domains.workflow import WorkflowConfig
from fogit.core.exceptions import (
    BranchExistsError,
    ClosedFeatureError,
    FeatureNotFoundError,
    GitError,
    RemoteOnlyFeatureError,
    UncommittedChangesError,
)
from fogit.core.git import GitRepository, extract_local_branch_name

from .branch import sanitize_branch_name
from .cross_branch import find_across_branches
from .finder import FeatureFinder
from .models import Feature
from .repository import FeatureRepository


def feature_branch(feature: Feature) -> str:
    """Branch bound in metadata, else the current version's branch, else ``""``."""
    if feature.branch:
        return feature.branch
    version = feature.current_version
    if version is not None and version.branch:
        return version.branch
    return ""


@dataclass
class SwitchResult:
    feature: Feature
    previous_branch: str = ""
    target_branch: str = ""
    already_on_branch: bool = False
    is_trunk_based: bool = False
    found_on_other_branch: bool = False
    source_branch: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature": self.feature.summary(),
            "previous_branch": self.previous_branch,
            "target_branch": self.target_branch,
            "already_on_branch": self.already_on_branch,
            "is_trunk_based": self.is_trunk_based,
            "found_on_other_branch": self.found_on_other_branch,
            "source_branch": self.source_branch,
        }


class SwitchEngine:
    def __init__(
        self,
        repository: FeatureRepository,
        git: GitRepository,
        *,
        workflow: Optional[WorkflowConfig] = None,
        search: Optional[SearchConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        root = Path(repository.project_root)
        self.repository = repository
        self.git = git
        self.workflow = workflow or WorkflowConfig(repo_root=root)
        self.search = search or SearchConfig(repo_root=root)
        self.logger = logger or logging.getLogger(__name__)

    def _locate(self, identifier: str) -> SwitchResult:
        try:
            feature = FeatureFinder(self.repository, self.search).find(identifier, fuzzy=False)
            return SwitchResult(feature=feature)
        except FeatureNotFoundError:
            pass

        found = find_across_branches(identifier, self.repository, self.git, self.search)
        if found.is_remote:
            local = extract_local_branch_name(found.branch)
            raise RemoteOnlyFeatureError(
                f"feature '{identifier}' found on remote branch '{found.branch}'. "
                f"Run 'git fetch' and 'git checkout {local}' first",
                context={"branch": found.branch},
            )
        return SwitchResult(
            feature=found.feature,
            found_on_other_branch=True,
            source_branch=found.branch,
        )

    def switch(self, identifier: str) -> SwitchResult:
        """Check out the branch of the feature named by ``identifier``.

        Raises:
            FeatureNotFoundError: No branch has the feature.
            RemoteOnlyFeatureError: Only a remote-tracking branch has it.
            ClosedFeatureError: The feature is closed.
            UncommittedChangesError: The working tree is dirty.
        """
        result = self._locate(identifier)
        feature = result.feature

        if feature.is_closed:
            raise ClosedFeatureError(
                f"cannot switch to closed feature '{feature.name}'. "
                f"Use 'fogit reopen {feature.name}' to start a new version",
                context={"feature_id": feature.id},
            )

        if self.workflow.is_trunk_based:
            result.is_trunk_based = True
            return result

        current = self.git.current_branch()
        target = feature_branch(feature) or sanitize_branch_name(feature.name)
        result.previous_branch = current
        result.target_branch = target

        if current == target:
            result.already_on_branch = True
            return result

        if self.git.has_uncommitted_changes():
            raise UncommittedChangesError(
                "uncommitted changes detected. Please commit or stash your changes before switching:\n"
                f"  git stash\n  fogit switch {feature.name}\n  git stash pop",
                context={"target_branch": target},
            )

        try:
            self.git.checkout(target)
        except GitError:
            try:
                self.git.create_branch(target)
            except BranchExistsError:
                pass
            self.git.checkout(target)
            self.logger.info("created branch %s for %s", target, feature.name)

        self.logger.info("switched from %s to %s", current, target)
        return result


__all__ = ["SwitchEngine", "SwitchResult", "feature_branch"]
