"""Git collaborator."""
from __future__ import annotations

from .repository import (
    DEFAULT_TRUNK,
    TRUNK_BRANCH_NAMES,
    Author,
    GitRepository,
    extract_local_branch_name,
    is_trunk_branch,
    parse_author,
    validate_ref_name,
)

__all__ = [
    "Author",
    "GitRepository",
    "DEFAULT_TRUNK",
    "TRUNK_BRANCH_NAMES",
    "extract_local_branch_name",
    "is_trunk_branch",
    "parse_author",
    "validate_ref_name",
]
