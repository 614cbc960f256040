"""Branch creation for new features against real repositories."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fogit.core.config.domains import WorkflowConfig
from fogit.core.exceptions import (
    BranchExistsError,
    BranchPolicyError,
    ConfigError,
    EmptyRepositoryError,
    NotAGitRepositoryError,
)
from fogit.core.feature import BranchAction, handle_branch_creation
from helpers.git_helpers import current_branch, git, git_checkout, git_commit, list_branches
from helpers.project import write_project_config

pytestmark = pytest.mark.requires_git


def _workflow(root: Path) -> WorkflowConfig:
    return WorkflowConfig(repo_root=root)


def _branch_contains(root: Path, branch: str, message: str) -> bool:
    log = git(root, "log", "--format=%s", branch).stdout.splitlines()
    return message in log


def test_creates_and_checks_out_branch(git_repo: Path) -> None:
    outcome = handle_branch_creation("User Login", _workflow(git_repo), repo_root=git_repo)
    assert outcome.action is BranchAction.CREATE
    assert outcome.created
    assert outcome.branch == "feature/user-login"
    assert outcome.message == "Created and checked out branch: feature/user-login"
    assert current_branch(git_repo) == "feature/user-login"


def test_existing_branch_is_rejected(git_repo: Path) -> None:
    git(git_repo, "branch", "feature/user-login")
    with pytest.raises(BranchExistsError) as exc:
        handle_branch_creation("User Login", _workflow(git_repo), repo_root=git_repo)
    assert str(exc.value) == (
        "branch feature/user-login already exists. Use --same to create feature on current branch"
    )
    assert current_branch(git_repo) == "main"


def test_repository_without_commits(empty_git_repo: Path) -> None:
    with pytest.raises(EmptyRepositoryError, match="no commits"):
        handle_branch_creation("X", _workflow(empty_git_repo), repo_root=empty_git_repo)


def test_outside_git_creation_is_skipped(project_dir: Path, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        outcome = handle_branch_creation("X", _workflow(project_dir), repo_root=project_dir)
    assert outcome.skipped
    assert outcome.branch is None
    assert outcome.message == "Initialize Git: git init"
    assert "branch creation skipped" in caplog.text


def test_same_stays_on_current_branch(git_repo: Path) -> None:
    git_checkout(git_repo, "feature/shared", create=True)
    outcome = handle_branch_creation("Second", _workflow(git_repo), same=True, repo_root=git_repo)
    assert outcome.action is BranchAction.STAY
    assert outcome.branch == "feature/shared"
    assert not outcome.created
    assert outcome.message == "Creating feature on current branch: feature/shared"
    assert list_branches(git_repo) == ["feature/shared", "main"]


def test_same_outside_git_fails(project_dir: Path) -> None:
    with pytest.raises(NotAGitRepositoryError):
        handle_branch_creation("X", _workflow(project_dir), same=True, repo_root=project_dir)


def test_same_requires_shared_branches(git_repo: Path) -> None:
    write_project_config(git_repo, {"workflow": {"allow_shared_branches": False}})
    with pytest.raises(BranchPolicyError):
        handle_branch_creation("X", _workflow(git_repo), same=True, repo_root=git_repo)


def test_trunk_based_mode_does_nothing(git_repo: Path) -> None:
    write_project_config(git_repo, {"workflow": {"mode": "trunk-based"}})
    outcome = handle_branch_creation("X", _workflow(git_repo), repo_root=git_repo)
    assert outcome.action is BranchAction.NONE
    assert outcome.branch is None
    assert list_branches(git_repo) == ["main"]


class TestCreateFrom:
    @pytest.fixture
    def on_other_branch(self, git_repo: Path) -> Path:
        git_checkout(git_repo, "feature/other", create=True)
        (git_repo / "other.txt").write_text("other\n", encoding="utf-8")
        git_commit(git_repo, "other work")
        return git_repo

    def test_trunk_strategy_branches_from_base(self, on_other_branch: Path) -> None:
        root = on_other_branch
        handle_branch_creation("New", _workflow(root), repo_root=root)
        assert current_branch(root) == "feature/new"
        assert not _branch_contains(root, "feature/new", "other work")

    def test_warn_strategy_branches_from_current(self, on_other_branch: Path, caplog) -> None:
        root = on_other_branch
        with caplog.at_level(logging.WARNING):
            handle_branch_creation("New", _workflow(root), create_from="warn", repo_root=root)
        assert _branch_contains(root, "feature/new", "other work")
        assert "instead of main" in caplog.text

    def test_current_strategy_branches_silently(self, on_other_branch: Path, caplog) -> None:
        root = on_other_branch
        write_project_config(root, {"workflow": {"create_branch_from": "current"}})
        with caplog.at_level(logging.WARNING):
            handle_branch_creation("New", _workflow(root), repo_root=root)
        assert _branch_contains(root, "feature/new", "other work")
        assert caplog.text == ""

    def test_missing_base_branch_falls_back_to_current(self, on_other_branch: Path, caplog) -> None:
        root = on_other_branch
        write_project_config(root, {"workflow": {"base_branch": "develop"}})
        with caplog.at_level(logging.WARNING):
            handle_branch_creation("New", _workflow(root), repo_root=root)
        assert _branch_contains(root, "feature/new", "other work")
        assert "develop does not exist" in caplog.text

    def test_unknown_strategy_is_a_config_error(self, on_other_branch: Path) -> None:
        with pytest.raises(ConfigError):
            handle_branch_creation("New", _workflow(on_other_branch), create_from="sideways", repo_root=on_other_branch)
