"""
fogit CLI package.

Commands are auto-discovered from ``cli/commands/``. Framework utilities
for building commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Repo root resolution, logging setup, project collaborators
"""
from ._output import OutputFormatter
from ._args import (
    add_feature_arg,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_verbose_flag,
)
from ._utils import Project, get_repo_root, setup_logging

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_feature_arg",
    "add_json_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    "add_verbose_flag",
    # Utilities
    "Project",
    "get_repo_root",
    "setup_logging",
]
