"""
fogit config command.

SUMMARY: Read or change configuration values
"""

from __future__ import annotations

import argparse
import sys

import yaml

from fogit.cli import OutputFormatter, add_standard_flags, get_repo_root, setup_logging

SUMMARY = "Read or change configuration values"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "action",
        choices=["get", "set", "list"],
        help="get <key>, set <key> <value>, or list the merged configuration",
    )
    parser.add_argument("key", nargs="?", help="Dotted key, e.g. workflow.mode")
    parser.add_argument("value", nargs="?", help="New value (for set)")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        from fogit.core.config import ConfigManager

        repo_root = get_repo_root(args)
        setup_logging(args, repo_root)
        manager = ConfigManager(repo_root=repo_root)

        if args.action == "list":
            config = manager.load_config()
            if formatter.json_mode:
                formatter.json_output(config)
            else:
                formatter.text(yaml.safe_dump(config, sort_keys=False, default_flow_style=False).rstrip())
            return 0

        if not args.key:
            raise ValueError(f"config {args.action} requires a key")

        if args.action == "get":
            value = manager.get(args.key)
            if formatter.json_mode:
                formatter.json_output({"key": args.key, "value": value})
            elif isinstance(value, (dict, list)):
                formatter.text(yaml.safe_dump(value, sort_keys=False, default_flow_style=False).rstrip())
            else:
                formatter.text(str(value))
            return 0

        if args.value is None:
            raise ValueError("config set requires a value")
        value = manager.set_project_value(args.key, args.value)
        formatter.success(
            {"key": args.key, "value": value},
            f"Set {args.key} = {value}",
            status="updated",
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
