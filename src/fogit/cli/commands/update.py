"""
fogit update command.

SUMMARY: Change a feature's name, description, priority or tags
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_feature_arg, add_standard_flags

SUMMARY = "Change a feature's name, description, priority or tags"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_feature_arg(parser)
    parser.add_argument("--name", help="New name")
    parser.add_argument("--description", "-d", help="New description (empty string clears it)")
    parser.add_argument(
        "--priority",
        "-p",
        choices=["low", "medium", "high", "critical"],
        help="New priority",
    )
    parser.add_argument("--add-tag", action="append", default=[], help="Add a tag (repeatable)")
    parser.add_argument("--remove-tag", action="append", default=[], help="Remove a tag (repeatable)")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.feature import FeatureFinder
        from fogit.core.feature.update import update_feature

        project = Project.from_args(args)
        feature = FeatureFinder(project.features, project.search).find(args.feature)
        changed = update_feature(
            project.features,
            feature,
            name=args.name,
            description=args.description,
            priority=args.priority,
            add_tags=args.add_tag,
            remove_tags=args.remove_tag,
        )

        if formatter.json_mode:
            formatter.json_output(
                {
                    "status": "updated" if changed else "unchanged",
                    "changed": changed,
                    "feature": feature.summary(),
                }
            )
            return 0

        if not changed:
            formatter.text(f"No changes to {feature.name}")
            return 0
        formatter.text(f"Updated feature: {feature.name}")
        formatter.text_kv("Changed", ", ".join(changed))
        formatter.text_kv("State", feature.state)
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
