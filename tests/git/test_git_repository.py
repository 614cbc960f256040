"""Tests for the git collaborator against real repositories."""
from __future__ import annotations

from pathlib import Path

import pytest

from fogit.core.exceptions import (
    BranchExistsError,
    EmptyRepositoryError,
    GitError,
    MergeConflictError,
    NotAGitRepositoryError,
    NothingToCommitError,
)
from fogit.core.git import Author, GitRepository, parse_author
from fogit.core.git.repository import extract_local_branch_name, is_trunk_branch, validate_ref_name
from helpers.git_helpers import add_remote_clone, git, git_checkout, git_commit, last_commit_message


class TestHelpers:
    def test_parse_author(self) -> None:
        assert parse_author("Ada Lovelace <ada@example.com>") == Author("Ada Lovelace", "ada@example.com")

    @pytest.mark.parametrize("value", ["ada@example.com", "<ada@example.com>", "Ada <not-an-email>", ""])
    def test_parse_author_rejects(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_author(value)

    def test_trunk_names(self) -> None:
        assert all(is_trunk_branch(n) for n in ("main", "master", "trunk"))
        assert not is_trunk_branch("develop")

    def test_extract_local_branch_name(self) -> None:
        assert extract_local_branch_name("origin/feature/x") == "feature/x"
        assert extract_local_branch_name("main") == "main"

    @pytest.mark.parametrize("ref", ["", "-rf", "a..b", "a b", "x;rm", ".hidden"])
    def test_validate_ref_name_rejects(self, ref: str) -> None:
        with pytest.raises(GitError):
            validate_ref_name(ref)


@pytest.mark.requires_git
class TestOpen:
    def test_open_outside_repository(self, project_dir: Path) -> None:
        with pytest.raises(NotAGitRepositoryError):
            GitRepository.open(project_dir)

    def test_open_from_subdirectory_finds_root(self, git_repo: Path) -> None:
        sub = git_repo / "src" / "pkg"
        sub.mkdir(parents=True)
        assert GitRepository.open(sub).root.resolve() == git_repo.resolve()


@pytest.mark.requires_git
class TestBranches:
    def test_current_branch_and_commits(self, git_repo: Path) -> None:
        repo = GitRepository.open(git_repo)
        assert repo.current_branch() == "main"
        assert repo.has_commits()
        assert repo.trunk_branch() == "main"

    def test_create_checkout_delete(self, git_repo: Path) -> None:
        repo = GitRepository.open(git_repo)
        repo.create_branch("feature/x")
        assert repo.branch_exists("feature/x")
        assert repo.current_branch() == "main"

        with pytest.raises(BranchExistsError):
            repo.create_branch("feature/x")

        repo.checkout("feature/x")
        assert repo.current_branch() == "feature/x"
        repo.checkout("main")
        repo.delete_branch("feature/x")
        assert not repo.branch_exists("feature/x")

    def test_create_branch_without_commits(self, empty_git_repo: Path) -> None:
        repo = GitRepository.open(empty_git_repo)
        assert not repo.has_commits()
        with pytest.raises(EmptyRepositoryError):
            repo.create_branch("feature/x")

    def test_local_and_remote_listing(self, git_repo: Path, tmp_path: Path) -> None:
        repo = GitRepository.open(git_repo)
        repo.create_branch("feature/b")
        repo.create_branch("feature/a")
        assert repo.list_local_branches() == ["feature/a", "feature/b", "main"]

        add_remote_clone(git_repo, tmp_path / "remote.git")
        remotes = repo.list_remote_branches()
        assert "origin/main" in remotes
        assert "origin/feature/a" in remotes
        assert not any(r.endswith("/HEAD") for r in remotes)

    def test_trunk_falls_back_to_master(self, tmp_path: Path) -> None:
        root = tmp_path / "legacy"
        root.mkdir()
        git(root, "init", "-b", "master")
        git(root, "config", "user.email", "t@example.com")
        git(root, "config", "user.name", "T")
        git_commit(root, "init", allow_empty=True)
        assert GitRepository.open(root).trunk_branch() == "master"


@pytest.mark.requires_git
class TestWorkingTree:
    def test_changed_files_includes_untracked_and_renamed(self, git_repo: Path) -> None:
        repo = GitRepository.open(git_repo)
        assert repo.changed_files() == []
        (git_repo / "new.txt").write_text("new\n", encoding="utf-8")
        (git_repo / "README.md").write_text("changed\n", encoding="utf-8")
        assert sorted(repo.changed_files()) == ["README.md", "new.txt"]
        assert repo.has_uncommitted_changes()

    def test_changed_files_keeps_non_ascii_and_spaces(self, git_repo: Path) -> None:
        repo = GitRepository.open(git_repo)
        (git_repo / "café.txt").write_text("café\n", encoding="utf-8")
        (git_repo / "a b.txt").write_text("space\n", encoding="utf-8")
        assert sorted(repo.changed_files()) == ["a b.txt", "café.txt"]

    def test_changed_files_reports_rename_target(self, git_repo: Path) -> None:
        repo = GitRepository.open(git_repo)
        git(git_repo, "mv", "README.md", "GUIDE é.md")
        assert repo.changed_files() == ["GUIDE é.md"]

    def test_commit_and_nothing_to_commit(self, git_repo: Path) -> None:
        repo = GitRepository.open(git_repo)
        (git_repo / "a.txt").write_text("a\n", encoding="utf-8")
        head = repo.commit("add a", Author("Ada", "ada@example.com"))
        assert head == repo.head()
        assert git(git_repo, "log", "-1", "--format=%an <%ae>").stdout.strip() == "Ada <ada@example.com>"
        with pytest.raises(NothingToCommitError):
            repo.commit("again")

    def test_stage_only_given_paths(self, git_repo: Path) -> None:
        repo = GitRepository.open(git_repo)
        (git_repo / ".fogit" / "features" / "x.yml").write_text("id: x\nname: X\n", encoding="utf-8")
        (git_repo / "other.txt").write_text("other\n", encoding="utf-8")
        repo.stage(".fogit")
        repo.commit("metadata only", stage_all=False)
        assert repo.changed_files() == ["other.txt"]

    def test_user_identity(self, git_repo: Path) -> None:
        assert GitRepository.open(git_repo).user_identity() == Author("Test User", "test@example.com")


@pytest.mark.requires_git
class TestMerges:
    def _diverge(self, root: Path, *, conflict: bool) -> None:
        git_checkout(root, "feature/x", create=True)
        (root / "README.md").write_text("feature side\n", encoding="utf-8")
        git_commit(root, "feature change")
        git_checkout(root, "main")
        if conflict:
            (root / "README.md").write_text("main side\n", encoding="utf-8")
            git_commit(root, "main change")

    def test_clean_merge(self, git_repo: Path) -> None:
        self._diverge(git_repo, conflict=False)
        repo = GitRepository.open(git_repo)
        repo.merge("feature/x")
        assert (git_repo / "README.md").read_text(encoding="utf-8") == "feature side\n"
        assert not repo.is_merging()

    def test_conflicting_merge_and_abort(self, git_repo: Path) -> None:
        self._diverge(git_repo, conflict=True)
        repo = GitRepository.open(git_repo)
        with pytest.raises(MergeConflictError) as exc:
            repo.merge("feature/x")
        assert exc.value.conflict_files == ["README.md"]
        assert repo.is_merging()
        assert repo.has_conflicts()

        repo.abort_merge()
        assert not repo.is_merging()
        assert (git_repo / "README.md").read_text(encoding="utf-8") == "main side\n"

    def test_conflicting_squash_merge_and_abort(self, git_repo: Path) -> None:
        self._diverge(git_repo, conflict=True)
        repo = GitRepository.open(git_repo)
        with pytest.raises(MergeConflictError):
            repo.merge("feature/x", squash=True)
        assert repo.is_merging()
        repo.abort_merge()
        assert not repo.is_merging()
        assert repo.changed_files() == []

    def test_squash_merge_stages_without_committing(self, git_repo: Path) -> None:
        self._diverge(git_repo, conflict=False)
        repo = GitRepository.open(git_repo)
        repo.merge("feature/x", squash=True)
        assert repo.changed_files() == ["README.md"]
        repo.commit("Merge branch 'feature/x' (squashed)")
        assert last_commit_message(git_repo) == "Merge branch 'feature/x' (squashed)"


@pytest.mark.requires_git
class TestOtherBranches:
    def test_read_files_without_checkout(self, git_repo: Path) -> None:
        git_checkout(git_repo, "feature/x", create=True)
        record = git_repo / ".fogit" / "features" / "x.yml"
        record.write_text("id: x\nname: X\n", encoding="utf-8")
        git_commit(git_repo, "add record")
        git_checkout(git_repo, "main")

        repo = GitRepository.open(git_repo)
        assert repo.list_files_on_branch("feature/x", ".fogit/features") == [".fogit/features/x.yml"]
        assert repo.read_file_on_branch("feature/x", ".fogit/features/x.yml") == "id: x\nname: X\n"
        assert repo.list_files_on_branch("main", ".fogit/features") == []

    def test_read_rejects_path_traversal(self, git_repo: Path) -> None:
        repo = GitRepository.open(git_repo)
        with pytest.raises(GitError):
            repo.read_file_on_branch("main", "../etc/passwd")
