"""Create a feature and the branch it lives on."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from fogit.core.config.domains.features import FeaturesConfig
from fogit.core.config.domains.workflow import WorkflowConfig

from .branch import BranchOutcome, handle_branch_creation
from .models import Feature, Relationship
from .relationships import CONTAINED_BY
from .repository import FeatureRepository


@dataclass
class CreateResult:
    feature: Feature
    branch: BranchOutcome

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature": self.feature.summary(),
            "branch": self.branch.branch,
            "branch_action": self.branch.action.value,
            "branch_created": self.branch.created,
        }


def create_feature(
    repository: FeatureRepository,
    name: str,
    *,
    description: str = "",
    tags: Iterable[str] = (),
    priority: Optional[str] = None,
    parent_id: Optional[str] = None,
    same: bool = False,
    isolate: bool = False,
    create_from: Optional[str] = None,
    workflow: Optional[WorkflowConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> CreateResult:
    """Build, branch and persist a new ``open`` feature.

    The branch is created before the record is written so the record lands
    on the new branch.

    Raises:
        ValueError: Empty name or invalid priority.
        BranchPolicyError: Invalid ``same``/``isolate`` combination.
        BranchExistsError / EmptyRepositoryError: Branch creation failed.
    """
    root = Path(repository.project_root)
    workflow = workflow or WorkflowConfig(repo_root=root)

    priority = priority or FeaturesConfig(repo_root=root).default_priority
    feature = Feature.new(name, description=description, priority=priority)
    for tag in tags:
        feature.add_tag(tag)
    if parent_id:
        # Attaching the parent must not move the new feature out of "open".
        feature.add_relationship(Relationship(type=CONTAINED_BY, target_id=parent_id), touch=False)
    feature.validate()

    outcome = handle_branch_creation(
        feature.name,
        workflow,
        same=same,
        isolate=isolate,
        create_from=create_from,
        repo_root=root,
        logger=logger,
    )
    if outcome.branch:
        feature.branch = outcome.branch

    repository.create(feature)
    return CreateResult(feature=feature, branch=outcome)


__all__ = ["CreateResult", "create_feature"]
