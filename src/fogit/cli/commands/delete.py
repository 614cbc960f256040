"""
fogit delete command.

SUMMARY: Delete a feature and relationships pointing at it
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_feature_arg, add_standard_flags

SUMMARY = "Delete a feature and relationships pointing at it"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_feature_arg(parser)
    parser.add_argument(
        "--keep-relationships",
        action="store_true",
        help="Leave other features' relationships to this one in place",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.feature import FeatureFinder
        from fogit.core.feature.delete import delete_feature

        project = Project.from_args(args)
        # Only exact matches; deleting never goes through fuzzy suggestions.
        feature = FeatureFinder(project.features, project.search).find(args.feature, fuzzy=False)
        result = delete_feature(
            project.features,
            feature,
            cleanup_relationships=not args.keep_relationships,
        )

        if formatter.json_mode:
            formatter.json_output({"status": "deleted", **result.to_dict()})
            return 0

        formatter.text(f"Deleted feature: {feature.name} ({feature.id})")
        if result.cleaned_up:
            formatter.text_kv("Relationships removed from", len(result.cleaned_up))
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
