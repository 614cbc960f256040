"""
fogit status command.

SUMMARY: Show the current branch, its active features and feature counts
"""

from __future__ import annotations

import argparse
import sys

from fogit.cli import OutputFormatter, Project, add_standard_flags

SUMMARY = "Show the current branch, its active features and feature counts"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.exceptions import NotAGitRepositoryError
        from fogit.core.feature.status import build_status_report, describe_recent

        project = Project.from_args(args)
        try:
            git = project.git
        except NotAGitRepositoryError:
            git = None
        report = build_status_report(project.features, git)

        if formatter.json_mode:
            formatter.json_output(report.to_dict())
            return 0

        formatter.text_kv("Branch", report.branch or "(none)", prefix="")
        if report.active_features:
            formatter.text("Active features:")
            formatter.text_list(f"{f.name} ({f.id})" for f in report.active_features)
        else:
            formatter.text("No active feature on this branch")

        formatter.text(f"Features: {report.total_features}")
        for state, count in report.counts.items():
            formatter.text_kv(state, count)
        formatter.text_kv("linked files", report.total_files)
        formatter.text_kv("relationships", report.total_relationships)

        if report.recent_changes:
            formatter.text("Recent changes:")
            formatter.text_list(describe_recent(f) for f in report.recent_changes)
        return 0
    except Exception as e:
        formatter.error(e)
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
