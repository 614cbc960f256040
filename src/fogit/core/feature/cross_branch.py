"""Cross-branch feature discovery.

Feature records live in the working tree, so a feature created on another
branch is invisible to the local store. Discovery reads other branches'
trees through git without checking them out, in a fixed order:

1. the current branch (local store)
2. the trunk branch, unless it is the current branch
3. other local branches, in git's listing order
4. remote-tracking branches
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from fogit.core.config.domains.search import SearchConfig
from fogit.core.exceptions import FeatureNotFoundError, GitError
from fogit.core.git import GitRepository
from fogit.core.utils.paths import FEATURES_TREE_PATH

from .finder import FeatureFinder, matches_identifier, not_found, suggest
from .models import Feature
from .repository import FEATURE_FILE_SUFFIXES, FeatureRepository, parse_feature

logger = logging.getLogger(__name__)


@dataclass
class CrossBranchFeature:
    feature: Feature
    branch: str
    is_remote: bool = False

    def to_dict(self) -> Dict[str, object]:
        data = self.feature.summary()
        data["found_on"] = self.branch
        data["is_remote"] = self.is_remote
        return data


def list_features_on_branch(git: GitRepository, branch: str) -> List[Feature]:
    """Parse every readable feature record in ``branch``'s tree.

    Raises:
        GitError: If the branch tree cannot be listed.
    """
    features: List[Feature] = []
    for path in git.list_files_on_branch(branch, FEATURES_TREE_PATH):
        if not path.lower().endswith(FEATURE_FILE_SUFFIXES):
            continue
        try:
            text = git.read_file_on_branch(branch, path)
        except GitError as exc:
            logger.debug("cannot read %s on %s: %s", path, branch, exc)
            continue
        feature = parse_feature(text)
        if feature is None:
            logger.debug("skipping unparsable %s on %s", path, branch)
            continue
        features.append(feature)
    return features


def _current_branch(git: GitRepository) -> str:
    try:
        return git.current_branch()
    except GitError:
        return ""


def _other_branches(git: GitRepository, current: str) -> Iterator[Tuple[str, bool]]:
    """Yield ``(branch, is_remote)`` for every branch except the current one, in discovery order."""
    trunk = git.trunk_branch()
    if trunk != current and git.branch_exists(trunk):
        yield trunk, False
    for branch in git.list_local_branches():
        if branch in (current, trunk):
            continue
        yield branch, False
    for branch in git.list_remote_branches():
        yield branch, True


def _features_on(git: GitRepository, branch: str) -> List[Feature]:
    try:
        return list_features_on_branch(git, branch)
    except GitError as exc:
        logger.debug("skipping branch %s: %s", branch, exc)
        return []


def find_across_branches(
    identifier: str,
    repository: FeatureRepository,
    git: GitRepository,
    search: Optional[SearchConfig] = None,
) -> CrossBranchFeature:
    """Return the first feature matching ``identifier`` in discovery order.

    Raises:
        AmbiguousFeatureError: The name is ambiguous on the current branch.
        FeatureNotFoundError: No branch has it; suggestions come from the
            current branch's records.
    """
    current = _current_branch(git)

    try:
        feature = FeatureFinder(repository, search).find(identifier, fuzzy=False)
        return CrossBranchFeature(feature=feature, branch=current)
    except FeatureNotFoundError:
        pass

    for branch, is_remote in _other_branches(git, current):
        for feature in _features_on(git, branch):
            if matches_identifier(feature, identifier):
                logger.debug("found %s on branch %s", identifier, branch)
                return CrossBranchFeature(feature=feature, branch=branch, is_remote=is_remote)

    raise not_found(identifier, suggest(identifier, repository.list(), search))


def list_features_across_branches(
    repository: FeatureRepository,
    git: GitRepository,
) -> List[CrossBranchFeature]:
    """Every feature on every branch, one entry per ID.

    A later-scanned copy replaces an earlier one only when its
    ``modified_at`` is strictly newer.
    """
    by_id: Dict[str, CrossBranchFeature] = {}

    def add(feature: Feature, branch: str, is_remote: bool) -> None:
        existing = by_id.get(feature.id)
        if existing is None or feature.last_modified > existing.feature.last_modified:
            by_id[feature.id] = CrossBranchFeature(feature=feature, branch=branch, is_remote=is_remote)

    current = _current_branch(git)
    for feature in repository.list():
        add(feature, current, False)

    for branch, is_remote in _other_branches(git, current):
        for feature in _features_on(git, branch):
            add(feature, branch, is_remote)

    return list(by_id.values())


__all__ = [
    "CrossBranchFeature",
    "find_across_branches",
    "list_features_across_branches",
    "list_features_on_branch",
]
