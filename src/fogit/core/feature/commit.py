"""Commit on a (possibly shared) feature branch.

Every open feature bound to the current branch shares the branch's
lifecycle: one git commit advances ``modified_at`` on all of them. Changed
files are linked to the primary (first) feature only.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from fogit.core.config.domains.commit import CommitConfig
from fogit.core.exceptions import FogitError, GitError, NoActiveFeatureError, NothingToCommitError
from fogit.core.git import Author, GitRepository, parse_author
from fogit.core.utils.paths import FOGIT_DIR_NAME

from .finder import FeatureFinder
from .models import Feature
from .repository import FeatureRepository


def is_fogit_path(path: str) -> bool:
    """True for paths inside the ``.fogit/`` metadata directory."""
    normalized = path.replace("\\", "/")
    return normalized == FOGIT_DIR_NAME or normalized.startswith(f"{FOGIT_DIR_NAME}/")


@dataclass
class CommitResult:
    branch: str
    features: List[Feature] = field(default_factory=list)
    primary_feature: Optional[Feature] = None
    hash: str = ""
    author: Optional[Author] = None
    changed_files: List[str] = field(default_factory=list)
    linked_files: List[str] = field(default_factory=list)
    nothing_to_commit: bool = False
    pushed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "author": str(self.author) if self.author else None,
            "branch": self.branch,
            "features": [f.summary() for f in self.features],
            "primary_feature": self.primary_feature.id if self.primary_feature else None,
            "changed_files": list(self.changed_files),
            "linked_files": list(self.linked_files),
            "nothing_to_commit": self.nothing_to_commit,
            "pushed": self.pushed,
        }


class SharedBranchCommit:
    """Commit the working tree and sync every bound feature's timestamps."""

    def __init__(
        self,
        repository: FeatureRepository,
        git: GitRepository,
        config: Optional[CommitConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.repository = repository
        self.git = git
        self.config = config or CommitConfig(repo_root=Path(repository.project_root))
        self.logger = logger or logging.getLogger(__name__)

    def _resolve_author(self, override: Optional[str]) -> Author:
        if override:
            try:
                return parse_author(override)
            except ValueError as exc:
                raise FogitError(str(exc), context={"author": override}) from exc
        identity = self.git.user_identity()
        if identity is None:
            raise FogitError("no author specified and git user.email not configured")
        return identity

    def commit(
        self,
        message: Optional[str] = None,
        *,
        author: Optional[str] = None,
        auto_link: Optional[bool] = None,
        push: Optional[bool] = None,
    ) -> CommitResult:
        """Commit all changes on the current branch.

        ``message`` defaults to the commit template rendered for the primary
        feature. ``auto_link`` and ``push`` default to config.

        Raises:
            NoActiveFeatureError: No open feature is bound to the branch.
            FogitError: No author could be determined.
            GitError: The commit itself failed.
        """
        branch = self.git.current_branch()
        result = CommitResult(branch=branch)

        features = FeatureFinder(self.repository).find_all_for_branch(branch)
        if not features:
            raise NoActiveFeatureError(
                "no active feature found. Create a feature with 'fogit feature'",
                context={"branch": branch},
            )
        result.features = features
        primary = features[0]
        result.primary_feature = primary

        result.changed_files = self.git.changed_files()
        if not result.changed_files:
            result.nothing_to_commit = True
            return result

        result.author = self._resolve_author(author)

        link = self.config.auto_link if auto_link is None else auto_link
        for feature in features:
            feature.touch()
            if link and feature is primary:
                for path in result.changed_files:
                    if is_fogit_path(path):
                        continue
                    feature.add_file(path)
                    result.linked_files.append(path)
            self.repository.update(feature)

        text = message or self.config.render_message(title=primary.name, feature_id=primary.id)
        try:
            result.hash = self.git.commit(text, result.author)
        except NothingToCommitError:
            # Feature timestamps were already persisted above.
            result.nothing_to_commit = True
            return result
        self.logger.info("committed %s on %s for %d feature(s)", result.hash[:8], branch, len(features))

        should_push = self.config.auto_push if push is None else push
        if should_push:
            try:
                self.git.push(branch, self.config.remote)
                result.pushed = True
            except GitError as exc:
                self.logger.warning("failed to push %s to %s: %s", branch, self.config.remote, exc)

        return result


def auto_commit_feature(
    git: GitRepository,
    feature: Feature,
    action: str,
    config: CommitConfig,
    *,
    logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """Commit the ``.fogit/`` directory after ``action`` on ``feature``.

    Only metadata is staged; other working-tree changes are left alone.
    Returns the new commit hash, or None when there was nothing to commit.
    """
    log = logger or logging.getLogger(__name__)
    author = git.user_identity()
    if author is None:
        raise FogitError("git user.email not configured")

    git.stage(FOGIT_DIR_NAME)
    message = config.render_message(title=feature.name, feature_id=feature.id, action=action)
    try:
        commit_hash = git.commit(message, author, stage_all=False)
    except NothingToCommitError:
        return None
    log.info("auto-committed %s for feature %s", commit_hash[:8], feature.id)

    if config.auto_push:
        try:
            git.push(git.current_branch(), config.remote)
        except GitError as exc:
            log.warning("failed to auto-push to %s: %s", config.remote, exc)
    return commit_hash


__all__ = ["CommitResult", "SharedBranchCommit", "auto_commit_feature", "is_fogit_path"]
