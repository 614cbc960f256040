"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path

from fogit.core.config.domains import LoggingConfig, SearchConfig, WorkflowConfig
from fogit.core.feature import FeatureRepository
from fogit.core.git import GitRepository
from fogit.core.logging import configure_logging
from fogit.core.utils.paths import get_fogit_dir, resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get repository root from ``--repo-root`` or auto-detect."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def setup_logging(args: argparse.Namespace, repo_root: Path) -> None:
    """Install CLI log handlers for this invocation.

    The log file is only written inside an initialized project.
    """
    cfg = LoggingConfig(repo_root=repo_root)
    level = "DEBUG" if getattr(args, "verbose", False) else cfg.level
    log_path = cfg.log_path if get_fogit_dir(repo_root).is_dir() else None
    configure_logging(
        log_path=log_path,
        level=level,
        console=not getattr(args, "json", False),
    )


@dataclass
class Project:
    """Collaborators a command needs, created lazily from one repo root."""

    root: Path

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Project":
        root = get_repo_root(args)
        setup_logging(args, root)
        return cls(root=root)

    @cached_property
    def features(self) -> FeatureRepository:
        return FeatureRepository(self.root)

    @cached_property
    def git(self) -> GitRepository:
        return GitRepository.open(self.root)

    @cached_property
    def workflow(self) -> WorkflowConfig:
        return WorkflowConfig(repo_root=self.root)

    @cached_property
    def search(self) -> SearchConfig:
        return SearchConfig(repo_root=self.root)


__all__ = ["Project", "get_repo_root", "setup_logging"]
