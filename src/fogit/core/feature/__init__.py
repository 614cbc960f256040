"""Feature records and the branch lifecycle built on them."""
from __future__ import annotations

from .branch import (
    BranchAction,
    BranchOutcome,
    determine_branch_action,
    handle_branch_creation,
    sanitize_branch_name,
)
from .commit import CommitResult, SharedBranchCommit, auto_commit_feature
from .create import CreateResult, create_feature
from .cross_branch import (
    CrossBranchFeature,
    find_across_branches,
    list_features_across_branches,
)
from .delete import DeleteResult, delete_feature
from .finder import FeatureFinder
from .merge import MergeEngine, MergeResult
from .merge_state import MergeState, MergeStateStore
from .models import (
    Feature,
    FeatureState,
    FeatureVersion,
    Relationship,
    VersionIncrement,
    increment_version,
)
from .relationships import FeatureGraph, RelationshipGraph, link_features, unlink_features
from .reopen import ReopenResult, reopen_branch_name, reopen_feature
from .repository import FeatureRepository
from .search import FeatureMatch, find_similar
from .status import StatusReport, build_status_report
from .switch import SwitchEngine, SwitchResult
from .update import update_feature

__all__ = [
    "BranchAction",
    "BranchOutcome",
    "CommitResult",
    "CreateResult",
    "CrossBranchFeature",
    "DeleteResult",
    "Feature",
    "FeatureFinder",
    "FeatureGraph",
    "FeatureMatch",
    "FeatureRepository",
    "FeatureState",
    "FeatureVersion",
    "MergeEngine",
    "MergeResult",
    "MergeState",
    "MergeStateStore",
    "Relationship",
    "RelationshipGraph",
    "ReopenResult",
    "SharedBranchCommit",
    "StatusReport",
    "SwitchEngine",
    "SwitchResult",
    "VersionIncrement",
    "auto_commit_feature",
    "build_status_report",
    "create_feature",
    "delete_feature",
    "determine_branch_action",
    "find_across_branches",
    "find_similar",
    "handle_branch_creation",
    "increment_version",
    "link_features",
    "list_features_across_branches",
    "reopen_branch_name",
    "reopen_feature",
    "sanitize_branch_name",
    "unlink_features",
    "update_feature",
]
