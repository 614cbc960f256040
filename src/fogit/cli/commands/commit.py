"""
fogit commit command.

SUMMARY: Commit changes and update every feature on the current branch
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_standard_flags

SUMMARY = "Commit changes and update every feature on the current branch"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument("--message", "-m", help="Commit message (default: commit.template)")
    parser.add_argument("--author", help='Override author as "Name <email>"')
    parser.add_argument(
        "--no-link",
        action="store_true",
        help="Do not link changed files to the primary feature",
    )
    parser.add_argument(
        "--push",
        action="store_true",
        default=None,
        help="Push after committing (default: commit.auto_push)",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.feature import SharedBranchCommit

        project = Project.from_args(args)
        result = SharedBranchCommit(project.features, project.git).commit(
            args.message,
            author=args.author,
            auto_link=False if args.no_link else None,
            push=args.push,
        )

        if formatter.json_mode:
            status = "nothing_to_commit" if result.nothing_to_commit else "committed"
            formatter.json_output({"status": status, **result.to_dict()})
            return 0

        if result.nothing_to_commit:
            formatter.text("Nothing to commit, working tree clean")
            return 0

        formatter.text(f"[{result.branch} {result.hash[:8]}] committed")
        formatter.text_kv("Author", result.author)
        if len(result.features) > 1:
            formatter.text(f"Updated {len(result.features)} features on this branch:")
            formatter.text_list(f.name for f in result.features)
        elif result.primary_feature is not None:
            formatter.text_kv("Feature", result.primary_feature.name)
        if result.linked_files:
            formatter.text(f"Linked {len(result.linked_files)} file(s)")
        if result.pushed:
            formatter.text("Pushed to remote")
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
