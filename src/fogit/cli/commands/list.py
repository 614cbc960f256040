"""
fogit list command.

SUMMARY: List features on this branch or across all branches
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_standard_flags

SUMMARY = "List features on this branch or across all branches"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--state",
        choices=["open", "in-progress", "closed"],
        action="append",
        help="Only list features in this state (repeatable)",
    )
    parser.add_argument(
        "--all-branches",
        action="store_true",
        help="Include features from other local and remote branches",
    )
    add_standard_flags(parser)


def _format_row(name: str, state: str, version: str | None, where: str) -> str:
    return f"{name:<40} {state:<12} v{version or '-':<8} {where}"


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        project = Project.from_args(args)

        if args.all_branches:
            from fogit.core.feature import list_features_across_branches

            entries = list_features_across_branches(project.features, project.git)
            if args.state:
                entries = [e for e in entries if str(e.feature.state) in args.state]
            if formatter.json_mode:
                formatter.json_output({"features": [e.to_dict() for e in entries], "count": len(entries)})
                return 0
            if not entries:
                formatter.text("No features found")
                return 0
            for entry in entries:
                where = f"{entry.branch} (remote)" if entry.is_remote else entry.branch
                formatter.text(
                    _format_row(
                        entry.feature.name,
                        str(entry.feature.state),
                        entry.feature.current_version_key,
                        where,
                    )
                )
            return 0

        features = project.features.list(state=args.state)
        if formatter.json_mode:
            formatter.json_output({"features": [f.summary() for f in features], "count": len(features)})
            return 0
        if not features:
            formatter.text("No features found")
            return 0
        for feature in features:
            formatter.text(
                _format_row(feature.name, str(feature.state), feature.current_version_key, feature.branch)
            )
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
