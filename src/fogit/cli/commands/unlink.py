"""
fogit unlink command.

SUMMARY: Remove relationships between two features
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_standard_flags

SUMMARY = "Remove relationships between two features"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("source", help="Source feature name or ID")
    parser.add_argument("target", help="Target feature name or ID")
    parser.add_argument("type", nargs="?", help="Only remove this relationship type")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.feature import FeatureFinder
        from fogit.core.feature.relationships import unlink_features

        project = Project.from_args(args)
        finder = FeatureFinder(project.features, project.search)
        source = finder.find(args.source)
        target = finder.find(args.target)
        removed = unlink_features(project.features, source, target.id, args.type)

        if formatter.json_mode:
            formatter.json_output(
                {
                    "status": "unlinked",
                    "source": source.summary(),
                    "target": target.summary(),
                    "removed": [r.to_dict() for r in removed],
                }
            )
            return 0

        for rel in removed:
            formatter.text(f"Removed relationship: {source.name} -> {target.name} ({rel.type})")
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
