"""
fogit feature command.

SUMMARY: Create a new feature (and its branch)
"""

from __future__ import annotations

import argparse
import logging
import sys

from fogit.cli import OutputFormatter, Project, add_standard_flags

SUMMARY = "Create a new feature (and its branch)"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("name", help="Feature name")
    parser.add_argument("--description", "-d", default="", help="Feature description")
    parser.add_argument(
        "--priority",
        "-p",
        choices=["low", "medium", "high", "critical"],
        help="Priority (default: medium)",
    )
    parser.add_argument(
        "--tags",
        action="append",
        default=[],
        help="Comma-separated tags (repeatable)",
    )
    parser.add_argument("--parent", help="Parent feature ID or name")
    parser.add_argument(
        "--same",
        action="store_true",
        help="Stay on the current branch (requires allow_shared_branches)",
    )
    parser.add_argument(
        "--isolate",
        action="store_true",
        help="Create a new branch even in trunk-based mode",
    )
    parser.add_argument(
        "--from",
        dest="create_from",
        choices=["trunk", "warn", "current"],
        help="Where to branch from (default: workflow.create_branch_from)",
    )
    parser.add_argument(
        "--no-commit",
        action="store_true",
        help="Do not auto-commit the new feature file",
    )
    add_standard_flags(parser)


def _split_tags(values: list[str]) -> list[str]:
    tags: list[str] = []
    for value in values:
        tags.extend(t.strip() for t in value.split(",") if t.strip())
    return tags


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.config.domains import CommitConfig
        from fogit.core.exceptions import FogitError
        from fogit.core.feature import FeatureFinder, auto_commit_feature, create_feature

        project = Project.from_args(args)

        parent_id = None
        if args.parent:
            parent_id = FeatureFinder(project.features, project.search).find(args.parent).id

        result = create_feature(
            project.features,
            args.name,
            description=args.description,
            tags=_split_tags(args.tags),
            priority=args.priority,
            parent_id=parent_id,
            same=args.same,
            isolate=args.isolate,
            create_from=args.create_from,
            workflow=project.workflow,
        )
        feature = result.feature

        commit_hash = None
        commit_config = CommitConfig(repo_root=project.root)
        if commit_config.auto_commit and not args.no_commit and not result.branch.skipped:
            try:
                commit_hash = auto_commit_feature(project.git, feature, "Create", commit_config)
            except FogitError as exc:
                logger.warning("failed to auto-commit feature %s: %s", feature.name, exc)

        if formatter.json_mode:
            formatter.json_output({**result.to_dict(), "commit": commit_hash})
            return 0

        if result.branch.message:
            formatter.text(result.branch.message)
        formatter.text(f"Created feature: {feature.id}")
        formatter.text_kv("Name", feature.name)
        if feature.description:
            formatter.text_kv("Description", feature.description)
        formatter.text_kv("State", feature.state)
        formatter.text_kv("Priority", feature.priority)
        if feature.tags:
            formatter.text_kv("Tags", ", ".join(feature.tags))
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
