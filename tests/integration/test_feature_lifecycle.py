"""Creating and reopening features against a real repository."""
from __future__ import annotations

from pathlib import Path

import pytest

from fogit.core.exceptions import FeatureStateError
from fogit.core.feature import FeatureRepository, create_feature, reopen_branch_name, reopen_feature
from fogit.core.feature.models import FeatureState
from fogit.core.feature.relationships import CONTAINED_BY
from fogit.core.git import GitRepository
from helpers.git_helpers import current_branch, git, git_commit, list_branches
from helpers.project import add_feature, write_project_config

pytestmark = pytest.mark.requires_git


def _closed_feature(root: Path, name: str = "User Auth"):
    repo = FeatureRepository(root)
    feature = add_feature(repo, name)
    feature.close()
    repo.update(feature)
    git_commit(root, f"Close {name}")
    return repo, repo.get(feature.id)


class TestCreateFeature:
    def test_creates_branch_and_record(self, git_repo: Path) -> None:
        repo = FeatureRepository(git_repo)

        result = create_feature(repo, "Dark Mode", description="Theme", tags=["ui", "ui"])

        assert result.branch.created
        assert current_branch(git_repo) == "feature/dark-mode"
        stored = repo.get(result.feature.id)
        assert stored.branch == "feature/dark-mode"
        assert stored.tags == ["ui"]
        assert stored.description == "Theme"
        assert stored.state is FeatureState.OPEN

    def test_parent_keeps_feature_open(self, git_repo: Path) -> None:
        repo = FeatureRepository(git_repo)
        parent = add_feature(repo, "Epic")

        result = create_feature(repo, "Child", parent_id=parent.id, same=True)

        stored = repo.get(result.feature.id)
        assert stored.state is FeatureState.OPEN
        assert [(r.type, r.target_id) for r in stored.relationships] == [(CONTAINED_BY, parent.id)]

    def test_default_priority_from_config(self, git_repo: Path) -> None:
        write_project_config(git_repo, {"features": {"default_priority": "high"}})
        result = create_feature(FeatureRepository(git_repo), "Urgent", same=True)
        assert result.feature.priority == "high"

    def test_explicit_priority_wins(self, git_repo: Path) -> None:
        result = create_feature(FeatureRepository(git_repo), "Chore", priority="low", same=True)
        assert result.feature.priority == "low"

    def test_invalid_priority(self, git_repo: Path) -> None:
        repo = FeatureRepository(git_repo)
        with pytest.raises(ValueError, match="invalid priority"):
            create_feature(repo, "Bad", priority="whenever", same=True)
        assert repo.list() == []
        assert current_branch(git_repo) == "main"

    def test_same_branch_records_current_branch(self, git_repo: Path) -> None:
        result = create_feature(FeatureRepository(git_repo), "Inline", same=True)
        assert result.feature.branch == "main"
        assert list_branches(git_repo) == ["main"]

    def test_trunk_based_leaves_branch_unset(self, git_repo: Path) -> None:
        write_project_config(git_repo, {"workflow": {"mode": "trunk-based"}})
        result = create_feature(FeatureRepository(git_repo), "Trunk Work")
        assert result.feature.branch == ""
        assert current_branch(git_repo) == "main"


class TestReopenFeature:
    def test_reopen_branch_name(self) -> None:
        assert reopen_branch_name("User Auth", "2") == "feature/user-auth-v2"
        assert reopen_branch_name("Café Login", "1.1.0") == "feature/cafe-login-v1.1.0"

    def test_minor_bump_creates_version_branch(self, git_repo: Path) -> None:
        repo, feature = _closed_feature(git_repo)

        result = reopen_feature(repo, feature, git=GitRepository.open(git_repo))

        assert (result.previous_version, result.new_version) == ("1", "2")
        assert result.branch == "feature/user-auth-v2"
        assert result.branch_created
        assert current_branch(git_repo) == "feature/user-auth-v2"

        stored = repo.get(feature.id)
        assert stored.state is FeatureState.OPEN
        assert stored.branch == "feature/user-auth-v2"
        assert stored.current_version_key == "2"
        assert stored.current_version.notes == "Reopened from version 1"
        assert stored.versions["1"].closed_at is not None

    def test_existing_version_branch_is_reused(self, git_repo: Path) -> None:
        repo, feature = _closed_feature(git_repo)
        git(git_repo, "branch", "feature/user-auth-v2")

        result = reopen_feature(repo, feature, git=GitRepository.open(git_repo))

        assert result.branch == "feature/user-auth-v2"
        assert not result.branch_created
        assert result.checked_out
        assert current_branch(git_repo) == "feature/user-auth-v2"

    def test_semantic_patch(self, git_repo: Path) -> None:
        write_project_config(git_repo, {"workflow": {"version_format": "semantic"}})
        repo, feature = _closed_feature(git_repo)

        result = reopen_feature(repo, feature, increment="patch")

        assert result.new_version == "1.0.1"
        assert not result.branch_created
        assert current_branch(git_repo) == "main"

    def test_explicit_version(self, git_repo: Path) -> None:
        repo, feature = _closed_feature(git_repo)
        result = reopen_feature(repo, feature, new_version="5")
        assert repo.get(feature.id).current_version_key == "5"
        assert result.branch == "feature/user-auth-v5"

    def test_simple_patch_is_rejected(self, git_repo: Path) -> None:
        repo, feature = _closed_feature(git_repo)
        with pytest.raises(FeatureStateError, match="already exists"):
            reopen_feature(repo, feature, increment="patch")

    def test_only_closed_features(self, git_repo: Path) -> None:
        repo = FeatureRepository(git_repo)
        feature = add_feature(repo, "Still Open")
        with pytest.raises(FeatureStateError, match="can only reopen closed features"):
            reopen_feature(repo, feature)

    def test_trunk_based_skips_branch(self, git_repo: Path) -> None:
        write_project_config(git_repo, {"workflow": {"mode": "trunk-based"}})
        repo, feature = _closed_feature(git_repo)

        result = reopen_feature(repo, feature, git=GitRepository.open(git_repo))

        assert not result.branch_created
        assert current_branch(git_repo) == "main"
        assert "feature/user-auth-v2" not in list_branches(git_repo)
