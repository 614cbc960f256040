"""
fogit link command.

SUMMARY: Create a relationship between two features
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_standard_flags

SUMMARY = "Create a relationship between two features"


def register_args(parser: argparse.ArgumentParser) -> None:
    from fogit.core.feature.relationships import RELATIONSHIP_TYPES

    parser.add_argument("source", help="Source feature name or ID")
    parser.add_argument("target", help="Target feature name or ID")
    parser.add_argument("type", choices=sorted(RELATIONSHIP_TYPES), help="Relationship type")
    parser.add_argument("--description", "-d", default="", help="Relationship description")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.feature import FeatureFinder
        from fogit.core.feature.relationships import link_features

        project = Project.from_args(args)
        finder = FeatureFinder(project.features, project.search)
        source = finder.find(args.source)
        target = finder.find(args.target)
        rel = link_features(project.features, source, target, args.type, description=args.description)

        if formatter.json_mode:
            formatter.json_output(
                {
                    "status": "linked",
                    "source": source.summary(),
                    "target": target.summary(),
                    "relationship": rel.to_dict(),
                }
            )
            return 0

        formatter.text(f"Created relationship: {source.name} -> {target.name} ({rel.type})")
        formatter.text_kv("ID", rel.id)
        if rel.description:
            formatter.text_kv("Description", rel.description)
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
