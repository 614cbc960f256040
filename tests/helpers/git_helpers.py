"""Git operation helpers for tests."""
from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List

from fogit.core.utils.subprocess import run_with_timeout


def git(repo_path: Path, *args: str, check: bool = True) -> subprocess.CompletedProcess:
    """Run ``git <args>`` in ``repo_path`` and return the completed process."""
    return run_with_timeout(
        ["git", *args],
        cwd=repo_path,
        check=check,
        capture_output=True,
        text=True,
    )


def git_init(repo_path: Path, branch: str = "main") -> None:
    """Initialize a git repository.

    Args:
        repo_path: Path to repository
        branch: Initial branch name
    """
    git(repo_path, "init", "-b", branch)


def git_config_identity(repo_path: Path, name: str = "Test User", email: str = "test@example.com") -> None:
    git(repo_path, "config", "user.name", name)
    git(repo_path, "config", "user.email", email)


def git_commit(repo_path: Path, message: str, allow_empty: bool = False) -> None:
    """Stage everything and create a commit.

    Args:
        repo_path: Path to repository
        message: Commit message
        allow_empty: Allow empty commits
    """
    git(repo_path, "add", "-A")
    cmd = ["commit", "-m", message]
    if allow_empty:
        cmd.append("--allow-empty")
    git(repo_path, *cmd)


def git_checkout(repo_path: Path, branch: str, create: bool = False) -> None:
    if create:
        git(repo_path, "checkout", "-b", branch)
    else:
        git(repo_path, "checkout", branch)


def current_branch(repo_path: Path) -> str:
    return git(repo_path, "rev-parse", "--abbrev-ref", "HEAD").stdout.strip()


def list_branches(repo_path: Path) -> List[str]:
    out = git(repo_path, "for-each-ref", "--format=%(refname:short)", "refs/heads").stdout
    return [line for line in out.splitlines() if line]


def last_commit_message(repo_path: Path, ref: str = "HEAD") -> str:
    return git(repo_path, "log", "-1", "--format=%s", ref).stdout.strip()


def is_clean(repo_path: Path) -> bool:
    return git(repo_path, "status", "--porcelain").stdout.strip() == ""


def add_remote_clone(repo_path: Path, bare_path: Path, name: str = "origin") -> None:
    """Push every local branch to a new bare repository and fetch it back as ``name``."""
    run_with_timeout(
        ["git", "init", "--bare", str(bare_path)],
        check=True,
        capture_output=True,
        text=True,
    )
    git(repo_path, "remote", "add", name, str(bare_path))
    git(repo_path, "push", name, "--all")
    git(repo_path, "fetch", name)
