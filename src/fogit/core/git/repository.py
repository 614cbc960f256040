"""Git collaborator built on the ``git`` CLI.

Every operation fogit needs from git goes through :class:`GitRepository`:
branch queries and mutations, commits, merges, and reading other branches'
trees without checking them out.
"""
from __future__ import annotations

import logging
import os
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from fogit.core.exceptions import (
    BranchExistsError,
    EmptyRepositoryError,
    GitError,
    MergeConflictError,
    NotAGitRepositoryError,
    NothingToCommitError,
)
from fogit.core.utils.subprocess import run_git_command

logger = logging.getLogger(__name__)

TRUNK_BRANCH_NAMES = frozenset({"main", "master", "trunk"})
DEFAULT_TRUNK = "main"

_SAFE_REF = re.compile(r"^[a-zA-Z0-9/_.-]+$")
_CONFLICT_MARKERS = ("CONFLICT", "Automatic merge failed")


@dataclass(frozen=True)
class Author:
    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


def parse_author(value: str) -> Author:
    """Parse ``"Name <email>"``.

    Raises:
        ValueError: If the value is not in that form.
    """
    match = re.fullmatch(r"\s*(.*?)\s*<([^<>\s]+@[^<>\s]+)>\s*", value or "")
    if not match or not match.group(1):
        raise ValueError(f"invalid author format {value!r}, expected 'Name <email>'")
    return Author(name=match.group(1), email=match.group(2))


def is_trunk_branch(name: str) -> bool:
    """Return True for the conventional trunk names (main, master, trunk)."""
    return name in TRUNK_BRANCH_NAMES


def extract_local_branch_name(remote_branch: str) -> str:
    """``origin/feature/x`` -> ``feature/x``; names without a remote pass through."""
    if "/" not in remote_branch:
        return remote_branch
    return remote_branch.split("/", 1)[1]


def validate_ref_name(ref: str) -> None:
    """Reject refs that could be interpreted as options or revision syntax."""
    if not ref or not _SAFE_REF.match(ref):
        raise GitError(f"invalid branch name: {ref!r}")
    if ref.startswith("-") or ref.startswith(".") or ".." in ref:
        raise GitError(f"invalid branch name: {ref!r}")


class GitRepository:
    """Thin, typed wrapper over one git working tree."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @classmethod
    def open(cls, path: Optional[Path] = None) -> "GitRepository":
        """Open the repository containing ``path`` (default: cwd).

        Raises:
            NotAGitRepositoryError: If ``path`` is not inside a work tree.
        """
        start = Path(path or Path.cwd())
        try:
            result = run_git_command(
                ["git", "rev-parse", "--show-toplevel"],
                cwd=start,
                capture_output=True,
            )
        except FileNotFoundError as exc:
            raise NotAGitRepositoryError("git executable not found on PATH") from exc
        root = (result.stdout or "").strip()
        if result.returncode != 0 or not root:
            raise NotAGitRepositoryError(
                f"not a git repository: {start}",
                context={"path": str(start)},
            )
        return cls(Path(root))

    # ---------- plumbing ----------

    def _run(
        self,
        *args: str,
        check: bool = True,
        env: Optional[Dict[str, str]] = None,
    ) -> subprocess.CompletedProcess:
        argv = ["git", *args]
        full_env = None
        if env:
            full_env = dict(os.environ)
            full_env.update(env)
        result = run_git_command(argv, cwd=self.root, env=full_env, capture_output=True)
        if check and result.returncode != 0:
            raise GitError(
                f"git {' '.join(args)} failed: {(result.stderr or result.stdout or '').strip()}",
                args=argv,
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result

    def _ok(self, *args: str) -> bool:
        return self._run(*args, check=False).returncode == 0

    @property
    def git_dir(self) -> Path:
        out = self._run("rev-parse", "--git-dir").stdout.strip()
        p = Path(out)
        return p if p.is_absolute() else self.root / p

    # ---------- branches ----------

    def current_branch(self) -> str:
        result = self._run("symbolic-ref", "--short", "-q", "HEAD", check=False)
        name = (result.stdout or "").strip()
        if result.returncode != 0 or not name:
            raise GitError("HEAD is detached; check out a branch first")
        return name

    def has_commits(self) -> bool:
        return self._ok("rev-parse", "--verify", "--quiet", "HEAD")

    def branch_exists(self, name: str) -> bool:
        return self._ok("show-ref", "--verify", "--quiet", f"refs/heads/{name}")

    def create_branch(self, name: str) -> None:
        """Create ``name`` at HEAD without switching to it."""
        validate_ref_name(name)
        if not self.has_commits():
            raise EmptyRepositoryError("repository has no commits")
        if self.branch_exists(name):
            raise BranchExistsError(f"branch {name} already exists", context={"branch": name})
        self._run("branch", name)

    def checkout(self, name: str) -> None:
        self._run("checkout", name)

    def delete_branch(self, name: str) -> None:
        self._run("branch", "-D", name)

    def _list_refs(self, namespace: str) -> List[str]:
        out = self._run("for-each-ref", "--format=%(refname)", namespace).stdout
        prefix = namespace.rstrip("/") + "/"
        names: List[str] = []
        for line in out.splitlines():
            ref = line.strip()
            if not ref.startswith(prefix) or ref.endswith("/HEAD"):
                continue
            names.append(ref[len(prefix):])
        return names

    def list_local_branches(self) -> List[str]:
        """Local branch names in git's listing order (sorted by refname)."""
        return self._list_refs("refs/heads")

    def list_remote_branches(self) -> List[str]:
        """Remote-tracking branches as ``<remote>/<branch>``, excluding ``HEAD``."""
        return self._list_refs("refs/remotes")

    def trunk_branch(self) -> str:
        """Detect the trunk: local main, local master, a remote main/master, else ``main``."""
        local = set(self.list_local_branches())
        for candidate in ("main", "master"):
            if candidate in local:
                return candidate
        remotes = self.list_remote_branches()
        for candidate in ("main", "master"):
            if any(remote.endswith(f"/{candidate}") for remote in remotes):
                return candidate
        return DEFAULT_TRUNK

    # ---------- working tree ----------

    def changed_files(self) -> List[str]:
        """Paths with staged, unstaged or untracked changes.

        Uses ``-z`` so paths come back unquoted; for renames and copies the
        new path is reported.
        """
        out = self._run("status", "--porcelain", "-z", "--untracked-files=all").stdout
        entries = out.split("\0")
        files: List[str] = []
        i = 0
        while i < len(entries):
            entry = entries[i]
            i += 1
            if len(entry) < 4:
                continue
            files.append(entry[3:])
            if "R" in entry[:2] or "C" in entry[:2]:
                # The original path follows as its own field.
                i += 1
        return files

    def has_uncommitted_changes(self) -> bool:
        return bool(self.changed_files())

    def user_identity(self) -> Optional[Author]:
        """Return git's configured ``user.name``/``user.email`` (None without an email)."""
        name = self._run("config", "user.name", check=False).stdout.strip()
        email = self._run("config", "user.email", check=False).stdout.strip()
        if not email:
            return None
        return Author(name=name or email, email=email)

    def stage(self, *paths: str) -> None:
        """``git add -A`` restricted to ``paths``."""
        self._run("add", "-A", "--", *paths)

    def head(self) -> str:
        return self._run("rev-parse", "HEAD").stdout.strip()

    def commit(self, message: str, author: Optional[Author] = None, *, stage_all: bool = True) -> str:
        """Stage everything (by default) and commit; returns the new HEAD hash.

        Raises:
            NothingToCommitError: If nothing is staged and no merge is pending.
        """
        if stage_all:
            self._run("add", "-A")

        merging = self.is_merging()
        if not merging and self.has_commits() and self._ok("diff", "--cached", "--quiet"):
            raise NothingToCommitError("nothing to commit")

        args = ["commit", "--no-verify", "-m", message]
        env: Optional[Dict[str, str]] = None
        if author is not None:
            args.extend(["--author", str(author)])
            env = {"GIT_COMMITTER_NAME": author.name, "GIT_COMMITTER_EMAIL": author.email}
        result = self._run(*args, check=False, env=env)
        if result.returncode != 0:
            output = f"{result.stdout}\n{result.stderr}"
            if "nothing to commit" in output or "nothing added to commit" in output:
                raise NothingToCommitError("nothing to commit")
            raise GitError(
                f"git commit failed: {output.strip()}",
                args=["git", *args],
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return self.head()

    # ---------- merges ----------

    def merge(self, branch: str, *, squash: bool = False) -> None:
        """Merge ``branch`` into the current branch.

        A squash merge only stages the result; the caller commits it.

        Raises:
            MergeConflictError: When git stops on conflicts.
            GitError: For any other failure.
        """
        validate_ref_name(branch)
        args = ["merge", "--squash", branch] if squash else ["merge", branch, "--no-edit"]
        result = self._run(*args, check=False)
        if result.returncode == 0:
            return
        output = f"{result.stdout}\n{result.stderr}"
        if any(marker in output for marker in _CONFLICT_MARKERS):
            raise MergeConflictError(
                f"merge conflict while merging {branch}",
                conflict_files=self.conflicted_files(),
                context={"branch": branch},
            )
        raise GitError(
            f"git merge failed: {output.strip()}",
            args=["git", *args],
            returncode=result.returncode,
            stderr=result.stderr,
        )

    def is_merging(self) -> bool:
        """True while a merge (or a conflicted squash merge) awaits a commit."""
        git_dir = self.git_dir
        return (git_dir / "MERGE_HEAD").exists() or (git_dir / "SQUASH_MSG").exists()

    def abort_merge(self) -> None:
        if (self.git_dir / "MERGE_HEAD").exists():
            self._run("merge", "--abort")
        else:
            # Squash merges leave no MERGE_HEAD for `merge --abort` to use.
            self._run("reset", "--merge")
            squash_msg = self.git_dir / "SQUASH_MSG"
            if squash_msg.exists():
                squash_msg.unlink()

    def conflicted_files(self) -> List[str]:
        out = self._run("diff", "--name-only", "--diff-filter=U", check=False).stdout
        return [line.strip() for line in out.splitlines() if line.strip()]

    def has_conflicts(self) -> bool:
        return bool(self.conflicted_files())

    # ---------- reading other branches ----------

    def list_files_on_branch(self, branch: str, directory: str) -> List[str]:
        """List files under ``directory`` in ``branch``'s tree without checkout."""
        validate_ref_name(branch)
        out = self._run("ls-tree", "-r", "--name-only", branch, "--", directory).stdout
        return [line for line in out.splitlines() if line]

    def read_file_on_branch(self, branch: str, path: str) -> str:
        """Return ``path``'s content as of ``branch`` without checkout."""
        validate_ref_name(branch)
        if ".." in Path(path).parts or path.startswith("/"):
            raise GitError(f"invalid path: {path!r}")
        return self._run("show", f"{branch}:{path}").stdout

    # ---------- remotes ----------

    def push(self, branch: str, remote: str = "origin") -> None:
        validate_ref_name(branch)
        self._run("push", "-u", remote, branch)


__all__ = [
    "Author",
    "GitRepository",
    "TRUNK_BRANCH_NAMES",
    "DEFAULT_TRUNK",
    "parse_author",
    "is_trunk_branch",
    "extract_local_branch_name",
    "validate_ref_name",
]
