"""Branch policy: which git branch a new feature lives on.

:func:`determine_branch_action` is a pure decision over the workflow mode
and the ``--same``/``--isolate`` flags. :func:`handle_branch_creation`
executes that decision against the repository.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from fogit.core.config.domains.workflow import (
    CREATE_FROM_CURRENT,
    CREATE_FROM_TRUNK,
    CREATE_FROM_WARN,
    MODE_BRANCH_PER_FEATURE,
    MODE_TRUNK_BASED,
    WorkflowConfig,
)
from fogit.core.exceptions import (
    BranchExistsError,
    BranchPolicyError,
    ConfigError,
    EmptyRepositoryError,
    NotAGitRepositoryError,
)
from fogit.core.git import GitRepository
from fogit.core.utils.text import slugify

_logger = logging.getLogger(__name__)

BRANCH_PREFIX = "feature/"
BRANCH_SLUG_MAX_LENGTH = 240


class BranchAction(str, Enum):
    NONE = "none"
    STAY = "stay"
    CREATE = "create"


def determine_branch_action(mode: str, allow_shared: bool, same: bool, isolate: bool) -> BranchAction:
    """Map workflow mode and flags to a branch action.

    Raises:
        BranchPolicyError: For flag combinations the mode does not allow.
    """
    if same and isolate:
        raise BranchPolicyError("cannot use both --same and --isolate flags")

    if mode == MODE_TRUNK_BASED:
        if same:
            raise BranchPolicyError("--same flag only works in branch-per-feature mode")
        if isolate:
            raise BranchPolicyError("--isolate flag only works in branch-per-feature mode")
        return BranchAction.NONE

    if mode == MODE_BRANCH_PER_FEATURE:
        if same:
            if not allow_shared:
                raise BranchPolicyError(
                    "--same flag requires workflow.allow_shared_branches: true in config"
                )
            return BranchAction.STAY
        return BranchAction.CREATE

    return BranchAction.NONE


def sanitize_branch_name(name: str) -> str:
    """``"Café Login / API"`` -> ``"feature/cafe-login-/-api"``-style git branch name."""
    slug = slugify(
        name,
        max_length=BRANCH_SLUG_MAX_LENGTH,
        allow_slashes=True,
        normalize_unicode=True,
        fallback="unnamed",
    )
    return f"{BRANCH_PREFIX}{slug}"


@dataclass
class BranchOutcome:
    action: BranchAction
    branch: Optional[str] = None
    created: bool = False
    skipped: bool = False
    message: str = ""


def _open_repo(repo_root: Optional[Path]) -> Optional[GitRepository]:
    try:
        return GitRepository.open(repo_root)
    except NotAGitRepositoryError:
        return None


def handle_branch_creation(
    feature_name: str,
    workflow: WorkflowConfig,
    *,
    same: bool = False,
    isolate: bool = False,
    create_from: Optional[str] = None,
    repo_root: Optional[Path] = None,
    logger: Optional[logging.Logger] = None,
) -> BranchOutcome:
    """Create, reuse or skip a branch for ``feature_name`` per workflow policy.

    ``create_from`` overrides ``workflow.create_branch_from`` for this call.

    Raises:
        BranchPolicyError: Invalid flag combination.
        NotAGitRepositoryError: ``--same`` outside a repository.
        BranchExistsError: The derived branch already exists.
        EmptyRepositoryError: The repository has no commits yet.
    """
    log = logger or _logger
    action = determine_branch_action(
        workflow.mode, workflow.allow_shared_branches, same, isolate
    )

    if action is BranchAction.NONE:
        return BranchOutcome(action=action)

    repo = _open_repo(repo_root)

    if action is BranchAction.STAY:
        if repo is None:
            raise NotAGitRepositoryError("not in a git repository")
        current = repo.current_branch()
        return BranchOutcome(
            action=action,
            branch=current,
            message=f"Creating feature on current branch: {current}",
        )

    branch_name = sanitize_branch_name(feature_name)
    if repo is None:
        log.warning("not in a git repository, branch creation skipped")
        return BranchOutcome(
            action=action,
            skipped=True,
            message="Initialize Git: git init",
        )

    if not repo.has_commits():
        raise EmptyRepositoryError(
            "repository has no commits. Make an initial commit first:\n"
            "  git add . && git commit -m \"Initial commit\"",
        )
    if repo.branch_exists(branch_name):
        raise BranchExistsError(
            f"branch {branch_name} already exists. Use --same to create feature on current branch",
            context={"branch": branch_name},
        )

    strategy = create_from or workflow.create_branch_from
    current = repo.current_branch()
    base = workflow.base_branch
    if strategy == CREATE_FROM_TRUNK:
        if current != base:
            if not repo.branch_exists(base):
                log.warning("base branch %s does not exist, branching from %s", base, current)
            else:
                log.info("switching to %s before creating %s", base, branch_name)
                repo.checkout(base)
    elif strategy == CREATE_FROM_WARN:
        if current != base:
            log.warning("creating %s from %s instead of %s", branch_name, current, base)
    elif strategy != CREATE_FROM_CURRENT:
        raise ConfigError(f"invalid workflow.create_branch_from: {strategy}")

    repo.create_branch(branch_name)
    repo.checkout(branch_name)
    log.info("created and checked out branch %s", branch_name)
    return BranchOutcome(
        action=action,
        branch=branch_name,
        created=True,
        message=f"Created and checked out branch: {branch_name}",
    )


__all__ = [
    "BRANCH_PREFIX",
    "BranchAction",
    "BranchOutcome",
    "determine_branch_action",
    "handle_branch_creation",
    "sanitize_branch_name",
]
