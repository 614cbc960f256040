"""
fogit show command.

SUMMARY: Show a feature's details, versions and relationships
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_feature_arg, add_standard_flags

SUMMARY = "Show a feature's details, versions and relationships"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_feature_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.feature import find_across_branches
        from fogit.core.utils.time import format_iso8601

        project = Project.from_args(args)
        # Searches the current branch first, then every other branch.
        found = find_across_branches(args.feature, project.features, project.git, project.search)
        feature = found.feature

        if formatter.json_mode:
            formatter.json_output(
                {
                    "feature": feature.to_dict(),
                    "state": str(feature.state),
                    "found_on": found.branch,
                    "is_remote": found.is_remote,
                }
            )
            return 0

        formatter.text(f"{feature.name} ({feature.id})")
        if feature.description:
            formatter.text_kv("Description", feature.description)
        formatter.text_kv("State", feature.state)
        formatter.text_kv("Priority", feature.priority)
        if feature.branch:
            formatter.text_kv("Branch", feature.branch)
        if found.branch and found.branch != feature.branch:
            formatter.text_kv("Found on", f"{found.branch} (remote)" if found.is_remote else found.branch)
        if feature.tags:
            formatter.text_kv("Tags", ", ".join(feature.tags))

        formatter.text("Versions:")
        for key, version in feature.versions.items():
            line = f"v{key} created {format_iso8601(version.created_at)}"
            if version.closed_at:
                line += f", closed {format_iso8601(version.closed_at)}"
            if version.notes:
                line += f" ({version.notes})"
            formatter.text_list([line])

        if feature.relationships:
            formatter.text("Relationships:")
            formatter.text_list(
                f"{rel.type} -> {rel.target_name or rel.target_id}" for rel in feature.relationships
            )
        if feature.files:
            formatter.text("Files:")
            formatter.text_list(feature.files)
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
