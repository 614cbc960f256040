"""
fogit switch command.

SUMMARY: Switch to a feature's branch
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_feature_arg, add_standard_flags

SUMMARY = "Switch to a feature's branch"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_feature_arg(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.feature import SwitchEngine

        project = Project.from_args(args)
        engine = SwitchEngine(
            project.features,
            project.git,
            workflow=project.workflow,
            search=project.search,
        )
        result = engine.switch(args.feature)
        feature = result.feature

        if formatter.json_mode:
            formatter.json_output({"status": "switched", **result.to_dict()})
            return 0

        if result.is_trunk_based:
            formatter.text(f"Switched context to feature: {feature.name}")
            formatter.text("(trunk-based mode: staying on the current branch)")
        elif result.already_on_branch:
            formatter.text(f"Already on branch '{result.target_branch}' for feature: {feature.name}")
        else:
            formatter.text(f"Switched to branch '{result.target_branch}'")
            formatter.text_kv("Feature", feature.name)
        if result.found_on_other_branch:
            formatter.text_kv("Found on", result.source_branch)
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
