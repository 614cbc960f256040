"""Domain-specific configuration for the branch workflow."""
from __future__ import annotations

from functools import cached_property

from ..base import BaseDomainConfig

MODE_BRANCH_PER_FEATURE = "branch-per-feature"
MODE_TRUNK_BASED = "trunk-based"

CREATE_FROM_TRUNK = "trunk"
CREATE_FROM_WARN = "warn"
CREATE_FROM_CURRENT = "current"

VERSION_FORMAT_SIMPLE = "simple"
VERSION_FORMAT_SEMANTIC = "semantic"


class WorkflowConfig(BaseDomainConfig):
    """Accessor for the ``workflow`` section.

    ``mode`` selects between one branch per feature and everything on trunk;
    ``create_branch_from`` decides where new feature branches start.
    """

    def _config_section(self) -> str:
        return "workflow"

    @cached_property
    def mode(self) -> str:
        return str(self.section.get("mode", MODE_BRANCH_PER_FEATURE))

    @cached_property
    def base_branch(self) -> str:
        return str(self.section.get("base_branch") or "main")

    @cached_property
    def allow_shared_branches(self) -> bool:
        return bool(self.section.get("allow_shared_branches", True))

    @cached_property
    def create_branch_from(self) -> str:
        return str(self.section.get("create_branch_from", CREATE_FROM_TRUNK))

    @cached_property
    def version_format(self) -> str:
        return str(self.section.get("version_format", VERSION_FORMAT_SIMPLE))

    @property
    def is_trunk_based(self) -> bool:
        return self.mode == MODE_TRUNK_BASED


__all__ = [
    "WorkflowConfig",
    "MODE_BRANCH_PER_FEATURE",
    "MODE_TRUNK_BASED",
    "CREATE_FROM_TRUNK",
    "CREATE_FROM_WARN",
    "CREATE_FROM_CURRENT",
    "VERSION_FORMAT_SIMPLE",
    "VERSION_FORMAT_SEMANTIC",
]
