"""Typed, cached accessors for individual config sections."""
from __future__ import annotations

from .commit import CommitConfig
from .features import FeaturesConfig
from .logging import LoggingConfig
from .search import SearchConfig
from .timeouts import TimeoutsConfig
from .workflow import (
    CREATE_FROM_CURRENT,
    CREATE_FROM_TRUNK,
    CREATE_FROM_WARN,
    MODE_BRANCH_PER_FEATURE,
    MODE_TRUNK_BASED,
    VERSION_FORMAT_SEMANTIC,
    VERSION_FORMAT_SIMPLE,
    WorkflowConfig,
)

__all__ = [
    "CommitConfig",
    "FeaturesConfig",
    "LoggingConfig",
    "SearchConfig",
    "TimeoutsConfig",
    "WorkflowConfig",
    "MODE_BRANCH_PER_FEATURE",
    "MODE_TRUNK_BASED",
    "CREATE_FROM_TRUNK",
    "CREATE_FROM_WARN",
    "CREATE_FROM_CURRENT",
    "VERSION_FORMAT_SIMPLE",
    "VERSION_FORMAT_SEMANTIC",
]
