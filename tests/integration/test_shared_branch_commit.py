"""Commits on (possibly shared) feature branches."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from fogit.core.config.domains import CommitConfig
from fogit.core.exceptions import FogitError, NoActiveFeatureError, NothingToCommitError
from fogit.core.feature import FeatureRepository, SharedBranchCommit, auto_commit_feature
from fogit.core.feature.commit import is_fogit_path
from fogit.core.git import GitRepository
from helpers.git_helpers import add_remote_clone, git, git_checkout, git_commit, is_clean, last_commit_message
from helpers.project import add_feature, write_project_config

pytestmark = pytest.mark.requires_git

T0 = datetime(2025, 6, 1, tzinfo=timezone.utc)


def test_is_fogit_path() -> None:
    assert is_fogit_path(".fogit/features/x.yml")
    assert is_fogit_path(".fogit")
    assert not is_fogit_path(".fogitrc")
    assert not is_fogit_path("src/.fogit/x")


@pytest.fixture
def shared_branch(git_repo: Path):
    """Two open features bound to feature/shared, committed there."""
    git_checkout(git_repo, "feature/shared", create=True)
    repo = FeatureRepository(git_repo)
    first = add_feature(repo, "First", branch="feature/shared", now=T0)
    second = add_feature(repo, "Second", branch="feature/shared", now=T0)
    git_commit(git_repo, "add features")
    return repo, GitRepository.open(git_repo), first, second


def _committer(repo: FeatureRepository, git_repo: GitRepository) -> SharedBranchCommit:
    return SharedBranchCommit(repo, git_repo, CommitConfig(repo_root=repo.project_root))


def test_commit_touches_every_bound_feature(shared_branch, git_repo: Path) -> None:
    repo, git_obj, first, second = shared_branch
    (git_repo / "app.py").write_text("print('hi')\n", encoding="utf-8")

    result = _committer(repo, git_obj).commit("Add app")

    assert result.hash == git_obj.head()
    assert last_commit_message(git_repo) == "Add app"
    assert {f.id for f in result.features} == {first.id, second.id}
    for feature_id in (first.id, second.id):
        assert repo.get(feature_id).state == "in-progress"
    assert is_clean(git_repo)


def test_changed_files_link_to_primary_only(shared_branch, git_repo: Path) -> None:
    repo, git_obj, _, _ = shared_branch
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")

    result = _committer(repo, git_obj).commit("Add app")

    primary = repo.get(result.primary_feature.id)
    other = next(f for f in result.features if f.id != primary.id)
    assert primary.files == ["app.py"]
    assert repo.get(other.id).files == []
    # Feature records themselves are never linked.
    assert all(not is_fogit_path(p) for p in result.linked_files)


def test_non_ascii_paths_are_linked_verbatim(shared_branch, git_repo: Path) -> None:
    repo, git_obj, _, _ = shared_branch
    (git_repo / "docs").mkdir()
    (git_repo / "docs" / "résumé notes.md").write_text("# notes\n", encoding="utf-8")

    result = _committer(repo, git_obj).commit("Add notes")

    assert result.linked_files == ["docs/résumé notes.md"]
    assert repo.get(result.primary_feature.id).files == ["docs/résumé notes.md"]


def test_no_link_option(shared_branch, git_repo: Path) -> None:
    repo, git_obj, _, _ = shared_branch
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")
    result = _committer(repo, git_obj).commit("Add app", auto_link=False)
    assert result.linked_files == []
    assert repo.get(result.primary_feature.id).files == []


def test_default_message_uses_template(shared_branch, git_repo: Path) -> None:
    repo, git_obj, _, _ = shared_branch
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")
    result = _committer(repo, git_obj).commit()
    primary = result.primary_feature
    assert last_commit_message(git_repo) == f"feat: {primary.name} ({primary.id})"


def test_author_override(shared_branch, git_repo: Path) -> None:
    repo, git_obj, _, _ = shared_branch
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")
    _committer(repo, git_obj).commit("Add app", author="Grace Hopper <grace@example.com>")
    assert git(git_repo, "log", "-1", "--format=%an <%ae>").stdout.strip() == "Grace Hopper <grace@example.com>"


def test_invalid_author_override(shared_branch, git_repo: Path) -> None:
    repo, git_obj, _, _ = shared_branch
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")
    with pytest.raises(FogitError, match="invalid author format"):
        _committer(repo, git_obj).commit("Add app", author="grace")


def test_missing_identity(shared_branch, git_repo: Path, monkeypatch) -> None:
    repo, git_obj, _, _ = shared_branch
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")
    monkeypatch.setattr(GitRepository, "user_identity", lambda self: None)
    with pytest.raises(FogitError, match="git user.email not configured"):
        _committer(repo, git_obj).commit("Add app")


def test_clean_tree_is_nothing_to_commit(shared_branch, git_repo: Path) -> None:
    repo, git_obj, first, second = shared_branch
    head = git_obj.head()
    before = {f.id: repo.get(f.id).modified_at for f in (first, second)}
    committer = _committer(repo, git_obj)

    assert committer.commit("noop").nothing_to_commit
    assert committer.commit("noop again").nothing_to_commit

    assert git_obj.head() == head
    assert {f.id: repo.get(f.id).modified_at for f in (first, second)} == before
    assert repo.get(first.id).state == "open"


def test_noop_git_commit_still_advances_feature_timestamps(shared_branch, git_repo: Path, monkeypatch) -> None:
    repo, git_obj, first, _ = shared_branch
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")

    def _nothing(self, message, author=None, *, stage_all=True):
        raise NothingToCommitError("nothing to commit")

    monkeypatch.setattr(GitRepository, "commit", _nothing)
    result = _committer(repo, git_obj).commit("Add app")

    assert result.nothing_to_commit
    assert result.hash == ""
    # Records were written before git reported the no-op.
    assert repo.get(first.id).state == "in-progress"


def test_no_open_feature(git_repo: Path) -> None:
    repo = FeatureRepository(git_repo)
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")
    with pytest.raises(NoActiveFeatureError) as exc:
        _committer(repo, GitRepository.open(git_repo)).commit("x")
    assert str(exc.value) == "no active feature found. Create a feature with 'fogit feature'"


def test_falls_back_to_most_recent_unbound_feature(git_repo: Path) -> None:
    repo = FeatureRepository(git_repo)
    add_feature(repo, "Old", now=T0)
    newest = add_feature(repo, "New", now=datetime(2025, 7, 1, tzinfo=timezone.utc))
    git_commit(git_repo, "records")
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")

    result = _committer(repo, GitRepository.open(git_repo)).commit("x")
    assert [f.id for f in result.features] == [newest.id]


def test_push_failure_is_only_a_warning(shared_branch, git_repo: Path, caplog) -> None:
    repo, git_obj, _, _ = shared_branch
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        result = _committer(repo, git_obj).commit("Add app", push=True)
    assert result.hash
    assert not result.pushed
    assert "failed to push" in caplog.text


def test_push_to_remote(shared_branch, git_repo: Path, tmp_path: Path) -> None:
    repo, git_obj, _, _ = shared_branch
    add_remote_clone(git_repo, tmp_path / "remote.git")
    (git_repo / "app.py").write_text("x = 1\n", encoding="utf-8")
    result = _committer(repo, git_obj).commit("Add app", push=True)
    assert result.pushed
    remote_head = git(git_repo, "rev-parse", "origin/feature/shared").stdout.strip()
    assert remote_head == result.hash


class TestAutoCommitFeature:
    def test_commits_only_metadata(self, git_repo: Path) -> None:
        repo = FeatureRepository(git_repo)
        feature = add_feature(repo, "Login")
        (git_repo / "unrelated.txt").write_text("wip\n", encoding="utf-8")
        git_obj = GitRepository.open(git_repo)

        commit_hash = auto_commit_feature(git_obj, feature, "Create", CommitConfig(repo_root=git_repo))

        assert commit_hash == git_obj.head()
        assert last_commit_message(git_repo) == f"feat: Login ({feature.id})"
        assert git_obj.changed_files() == ["unrelated.txt"]

    def test_nothing_to_commit_returns_none(self, git_repo: Path) -> None:
        feature = add_feature(FeatureRepository(git_repo), "Login")
        git_commit(git_repo, "already committed")
        assert auto_commit_feature(GitRepository.open(git_repo), feature, "Create", CommitConfig(repo_root=git_repo)) is None

    def test_action_in_template(self, git_repo: Path) -> None:
        write_project_config(git_repo, {"commit": {"template": "[{action}] {name}"}})
        feature = add_feature(FeatureRepository(git_repo), "Login")
        auto_commit_feature(GitRepository.open(git_repo), feature, "Reopen", CommitConfig(repo_root=git_repo))
        assert last_commit_message(git_repo) == "[Reopen] Login"
