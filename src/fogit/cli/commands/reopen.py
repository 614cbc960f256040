"""
fogit reopen command.

SUMMARY: Start a new version of a closed feature
"""

from __future__ import annotations

import argparse
import logging
import sys

from fogit.cli import OutputFormatter, Project, add_feature_arg, add_standard_flags

SUMMARY = "Start a new version of a closed feature"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_feature_arg(parser)
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--version", dest="new_version", help='Explicit version (e.g. "5" or "2.0.0")')
    group.add_argument(
        "--patch",
        dest="increment",
        action="store_const",
        const="patch",
        help="Increment the patch version (semantic only)",
    )
    group.add_argument(
        "--minor",
        dest="increment",
        action="store_const",
        const="minor",
        help="Increment the minor version (default)",
    )
    group.add_argument(
        "--major",
        dest="increment",
        action="store_const",
        const="major",
        help="Increment the major version",
    )
    parser.add_argument(
        "--no-commit",
        action="store_true",
        help="Do not auto-commit the updated feature file",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.config.domains import CommitConfig
        from fogit.core.exceptions import FogitError, NotAGitRepositoryError
        from fogit.core.feature import FeatureFinder, auto_commit_feature, reopen_feature

        project = Project.from_args(args)
        feature = FeatureFinder(project.features, project.search).find(args.feature)
        try:
            git = project.git
        except NotAGitRepositoryError:
            git = None

        result = reopen_feature(
            project.features,
            feature,
            new_version=args.new_version,
            increment=args.increment or "minor",
            workflow=project.workflow,
            git=git,
        )

        commit_hash = None
        commit_config = CommitConfig(repo_root=project.root)
        if git is not None and commit_config.auto_commit and not args.no_commit:
            try:
                commit_hash = auto_commit_feature(git, feature, "Reopen", commit_config)
            except FogitError as exc:
                logger.warning("failed to auto-commit feature %s: %s", feature.name, exc)

        if formatter.json_mode:
            formatter.json_output({"status": "reopened", **result.to_dict(), "commit": commit_hash})
            return 0

        formatter.text(
            f"Reopened feature: {feature.name} (v{result.previous_version} -> v{result.new_version})"
        )
        if result.checked_out:
            formatter.text(f"Switched to branch '{result.branch}'")
        formatter.text_kv("State", feature.state)
        if commit_hash:
            formatter.text(f"Committed: {commit_hash[:8]}")
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
