"""Close features and merge their branch into the base branch.

The engine is a two-state machine:

- **Idle**: no ``.fogit/MERGE_STATE``. :meth:`MergeEngine.merge` closes
  the target features and, off trunk, merges the feature branch. A clean
  merge returns to Idle; a conflicting one saves MergeState.
- **ConflictPending**: MergeState exists. Only
  :meth:`MergeEngine.continue_merge` and :meth:`MergeEngine.abort` are
  accepted; both return to Idle.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fogit.core.config.domains.workflow import WorkflowConfig
from fogit.core.exceptions import (
    ConflictsRemainingError,
    GitError,
    MergeConflictError,
    MergeFailedError,
    MergeInProgressError,
    NoActiveFeatureError,
    NoMergeInProgressError,
    NothingToCommitError,
    TargetBranchMissingError,
    UncommittedChangesError,
)
from fogit.core.git import GitRepository, is_trunk_branch
from fogit.core.utils.time import utc_now

from .finder import FeatureFinder
from .merge_state import MergeState, MergeStateError, MergeStateStore
from .models import Feature, FeatureState
from .relationships import FeatureGraph, RelationshipGraph
from .repository import FeatureRepository

CLOSE_COMMIT_MESSAGE = "Close feature(s) for merge"


def merge_commit_message(branch: str, *, squash: bool = False) -> str:
    message = f"Merge branch '{branch}'"
    return f"{message} (squashed)" if squash else message


@dataclass
class MergeResult:
    branch: str = ""
    base_branch: str = ""
    closed_features: List[Feature] = field(default_factory=list)
    is_main_branch: bool = False
    no_delete: bool = False
    branch_deleted: bool = False
    merge_performed: bool = False
    conflict_detected: bool = False
    conflict_files: List[str] = field(default_factory=list)
    aborted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "branch": self.branch,
            "base_branch": self.base_branch,
            "closed_features": [f.summary() for f in self.closed_features],
            "is_main_branch": self.is_main_branch,
            "no_delete": self.no_delete,
            "branch_deleted": self.branch_deleted,
            "merge_performed": self.merge_performed,
            "conflict_detected": self.conflict_detected,
            "conflict_files": list(self.conflict_files),
            "aborted": self.aborted,
        }


def most_recent_first_seen(features: List[Feature]) -> Optional[Feature]:
    """Most recently modified feature; on equal timestamps the first one wins."""
    most_recent: Optional[Feature] = None
    for feature in features:
        if most_recent is None or feature.last_modified > most_recent.last_modified:
            most_recent = feature
    return most_recent


class MergeEngine:
    """merge / continue / abort over one project's features and git repository."""

    def __init__(
        self,
        repository: FeatureRepository,
        git: GitRepository,
        *,
        workflow: Optional[WorkflowConfig] = None,
        state_store: Optional[MergeStateStore] = None,
        graph_factory: Optional[Callable[[List[Feature]], FeatureGraph]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        root = Path(repository.project_root)
        self.repository = repository
        self.git = git
        self.workflow = workflow or WorkflowConfig(repo_root=root)
        self.state_store = state_store or MergeStateStore(root)
        self.graph_factory = graph_factory or RelationshipGraph
        self.logger = logger or logging.getLogger(__name__)

    # ---------- fresh merge ----------

    def _features_to_close(self, feature_name: Optional[str], branch: str) -> List[Feature]:
        if feature_name:
            return [FeatureFinder(self.repository).find(feature_name, fuzzy=False)]

        candidates = self.repository.list(state=[FeatureState.OPEN, FeatureState.IN_PROGRESS])
        bound = [f for f in candidates if f.branch == branch]
        if bound:
            return bound
        fallback = most_recent_first_seen(candidates)
        return [fallback] if fallback is not None else []

    def _warn_open_dependents(self, targets: List[Feature]) -> None:
        graph = self.graph_factory(self.repository.list())
        closing = {f.id for f in targets}
        for feature in targets:
            dependents = [d for d in graph.open_dependents(feature.id) if d.id not in closing]
            if dependents:
                self.logger.warning(
                    "closing '%s' while open features depend on it: %s",
                    feature.name,
                    ", ".join(d.name for d in dependents),
                )

    def merge(
        self,
        feature_name: Optional[str] = None,
        *,
        no_delete: bool = False,
        squash: bool = False,
    ) -> MergeResult:
        """Close features for the current branch and merge it into the base branch.

        Raises:
            MergeInProgressError: A conflicted merge is still pending.
            TargetBranchMissingError: The base branch does not exist.
            FeatureNotFoundError: ``feature_name`` matched nothing.
            NoActiveFeatureError: Nothing is open to close.
            UncommittedChangesError: The working tree is dirty.
            MergeFailedError: git failed for a reason other than conflicts.
        """
        if self.state_store.exists():
            raise MergeInProgressError(
                "merge in progress: use 'fogit merge --continue' to finish "
                "or 'fogit merge --abort' to cancel"
            )

        base = self.workflow.base_branch or "main"
        branch = self.git.current_branch()
        result = MergeResult(
            branch=branch,
            base_branch=base,
            is_main_branch=is_trunk_branch(branch),
            no_delete=no_delete,
        )

        if not result.is_main_branch and not self.git.branch_exists(base):
            raise TargetBranchMissingError(
                f"target branch '{base}' does not exist. Configure with:\n"
                f"  fogit config set workflow.base_branch <branch_name>\n"
                f"or create it with:\n"
                f"  git branch {base}",
                context={"base_branch": base},
            )

        targets = self._features_to_close(feature_name, branch)
        if not targets:
            raise NoActiveFeatureError("no open features found to close", context={"branch": branch})

        changed = self.git.changed_files()
        if changed:
            raise UncommittedChangesError(
                "you have uncommitted changes. Commit or stash them first:\n  " + "\n  ".join(changed),
                context={"files": changed},
            )

        self._warn_open_dependents(targets)
        now = utc_now()
        for feature in targets:
            feature.close(now)
            self.repository.update(feature)
            self.logger.info("closed feature %s (%s)", feature.name, feature.id)
        result.closed_features = targets

        if result.is_main_branch:
            return result

        try:
            self.git.commit(CLOSE_COMMIT_MESSAGE)
        except NothingToCommitError:
            pass
        self.git.checkout(base)

        try:
            self.git.merge(branch, squash=squash)
        except MergeConflictError as exc:
            return self._record_conflict(result, targets, exc.conflict_files, squash)
        except GitError as exc:
            self._recover_failed_merge(branch)
            raise MergeFailedError(f"merge failed: {exc}", context={"branch": branch}) from exc

        if squash:
            try:
                self.git.commit(merge_commit_message(branch, squash=True))
            except NothingToCommitError:
                pass
        result.merge_performed = True
        self.logger.info("merged %s into %s", branch, base)

        if not no_delete:
            result.branch_deleted = self._delete_branch(branch)
        return result

    def _record_conflict(
        self,
        result: MergeResult,
        targets: List[Feature],
        conflict_files: List[str],
        squash: bool,
    ) -> MergeResult:
        state = MergeState(
            feature_branch=result.branch,
            base_branch=result.base_branch,
            feature_ids=[f.id for f in targets],
            no_delete=result.no_delete,
            squash=squash,
            conflict_files=list(conflict_files),
        )
        try:
            self.state_store.save(state)
        except MergeStateError as exc:
            self.logger.warning("could not save merge state: %s", exc)
        self.logger.warning(
            "merge of %s into %s stopped on conflicts: %s",
            result.branch,
            result.base_branch,
            ", ".join(conflict_files) or "(unknown files)",
        )
        result.conflict_detected = True
        result.conflict_files = list(conflict_files)
        return result

    def _recover_failed_merge(self, branch: str) -> None:
        try:
            if self.git.is_merging():
                self.git.abort_merge()
            self.git.checkout(branch)
        except GitError as exc:
            self.logger.warning("could not return to %s after failed merge: %s", branch, exc)

    def _delete_branch(self, branch: str) -> bool:
        try:
            self.git.delete_branch(branch)
        except GitError as exc:
            self.logger.warning("could not delete branch %s: %s", branch, exc)
            return False
        self.logger.info("deleted branch %s", branch)
        return True

    # ---------- conflict resolution ----------

    def _load_state(self) -> MergeState:
        state = self.state_store.load()
        if state is None:
            raise NoMergeInProgressError("no merge in progress")
        return state

    def continue_merge(self) -> MergeResult:
        """Finish a conflicted merge after the user resolved and staged it.

        Raises:
            NoMergeInProgressError: No MergeState exists.
            ConflictsRemainingError: Unresolved files are still present.
        """
        state = self._load_state()
        result = MergeResult(
            branch=state.feature_branch,
            base_branch=state.base_branch,
            no_delete=state.no_delete,
        )

        if self.git.is_merging():
            remaining = self.git.conflicted_files()
            if remaining:
                raise ConflictsRemainingError(
                    "conflicts remaining: resolve all conflicts and stage the changes, "
                    "then run 'fogit merge --continue'",
                    conflict_files=remaining,
                )
            try:
                self.git.commit(merge_commit_message(state.feature_branch, squash=state.squash))
            except NothingToCommitError:
                pass
        # Otherwise the user already committed the merge by hand.

        result.merge_performed = True
        for feature_id in state.feature_ids:
            feature = self.repository.get(feature_id)
            if feature is not None:
                result.closed_features.append(feature)

        if not state.no_delete:
            result.branch_deleted = self._delete_branch(state.feature_branch)

        self.state_store.clear()
        self.logger.info("completed merge of %s into %s", state.feature_branch, state.base_branch)
        return result

    def abort(self) -> MergeResult:
        """Cancel a conflicted merge and reopen the features it closed.

        Raises:
            NoMergeInProgressError: No MergeState exists.
        """
        state = self._load_state()
        result = MergeResult(
            branch=state.feature_branch,
            base_branch=state.base_branch,
            no_delete=state.no_delete,
            aborted=True,
        )

        if self.git.is_merging():
            self.git.abort_merge()
        self.git.checkout(state.feature_branch)

        for feature_id in state.feature_ids:
            feature = self.repository.get(feature_id)
            if feature is None:
                self.logger.debug("feature %s no longer exists, skipping", feature_id)
                continue
            feature.clear_closed()
            self.repository.update(feature)

        self.state_store.clear()
        self.logger.info("aborted merge of %s into %s", state.feature_branch, state.base_branch)
        return result


__all__ = [
    "CLOSE_COMMIT_MESSAGE",
    "MergeEngine",
    "MergeResult",
    "merge_commit_message",
    "most_recent_first_seen",
]
