"""
fogit init command.

SUMMARY: Initialize fogit in the current repository
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, add_standard_flags, get_repo_root, setup_logging

SUMMARY = "Initialize fogit in the current repository"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--mode",
        choices=["branch-per-feature", "trunk-based"],
        help="Workflow mode (default: branch-per-feature)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing .fogit/config.yml",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Create .fogit/ with a features directory and project config."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.project import init_project

        project_root = get_repo_root(args)
        result = init_project(project_root, mode=args.mode, force=args.force)
        # The log file can only be opened once .fogit/ exists.
        setup_logging(args, project_root)

        if formatter.json_mode:
            formatter.json_output({"status": "initialized", **result.to_dict()})
            return 0

        formatter.text(f"Initialized fogit in {project_root / '.fogit'}")
        workflow = result.config.get("workflow", {})
        formatter.text_kv("Mode", workflow.get("mode"))
        formatter.text_kv("Base branch", workflow.get("base_branch"))
        if result.skipped:
            formatter.text("Kept existing:")
            formatter.text_list(str(p) for p in result.skipped)
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
