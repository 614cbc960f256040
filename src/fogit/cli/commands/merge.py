"""
fogit merge command.

SUMMARY: Close the branch's features and merge it into the base branch
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_feature_arg, add_standard_flags

SUMMARY = "Close the branch's features and merge it into the base branch"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_feature_arg(parser, required=False, help_text="Close only this feature (name or ID)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--continue",
        dest="continue_merge",
        action="store_true",
        help="Finish a merge after resolving conflicts",
    )
    group.add_argument(
        "--abort",
        action="store_true",
        help="Abort a conflicted merge and reopen its features",
    )
    parser.add_argument(
        "--no-delete",
        action="store_true",
        help="Keep the feature branch after merging",
    )
    parser.add_argument(
        "--squash",
        action="store_true",
        help="Squash the branch into a single commit",
    )
    add_standard_flags(parser)


def _print_result(formatter: OutputFormatter, result) -> None:
    if result.aborted:
        formatter.text(f"Merge aborted. Back on branch '{result.branch}'")
        return

    for feature in result.closed_features:
        formatter.text(f"Closed feature: {feature.name}")

    if result.conflict_detected:
        formatter.text(f"\nMerge conflict while merging '{result.branch}' into '{result.base_branch}'.")
        formatter.text("Conflicting files:")
        formatter.text_list(result.conflict_files)
        formatter.text("\nResolve the conflicts, stage the files, then run:")
        formatter.text("  fogit merge --continue")
        formatter.text("or cancel with:")
        formatter.text("  fogit merge --abort")
        return

    if result.is_main_branch:
        formatter.text(f"On trunk branch '{result.branch}': features closed, nothing to merge")
        return

    if result.merge_performed:
        formatter.text(f"Merged '{result.branch}' into '{result.base_branch}'")
    if result.branch_deleted:
        formatter.text(f"Deleted branch '{result.branch}'")
    elif not result.no_delete:
        formatter.text(f"Branch '{result.branch}' was kept (delete failed)")


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.feature import MergeEngine

        project = Project.from_args(args)
        engine = MergeEngine(project.features, project.git, workflow=project.workflow)

        if args.continue_merge:
            result = engine.continue_merge()
        elif args.abort:
            result = engine.abort()
        else:
            result = engine.merge(args.feature, no_delete=args.no_delete, squash=args.squash)

        if formatter.json_mode:
            if result.aborted:
                status = "aborted"
            elif result.conflict_detected:
                status = "conflict"
            else:
                status = "merged" if result.merge_performed else "closed"
            formatter.json_output({"status": status, **result.to_dict()})
        else:
            _print_result(formatter, result)

        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
