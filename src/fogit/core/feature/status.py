"""Repository status: where you are and what is tracked."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from fogit.core.exceptions import GitError
from fogit.core.git import GitRepository
from fogit.core.utils.time import format_iso8601, utc_now

from .finder import FeatureFinder
from .models import Feature, FeatureState
from .repository import FeatureRepository

RECENT_WINDOW = timedelta(days=7)
RECENT_LIMIT = 5


@dataclass
class StatusReport:
    branch: str = ""
    total_features: int = 0
    total_files: int = 0
    counts: Dict[str, int] = field(default_factory=dict)
    relationship_types: Dict[str, int] = field(default_factory=dict)
    active_features: List[Feature] = field(default_factory=list)
    recent_changes: List[Feature] = field(default_factory=list)

    @property
    def total_relationships(self) -> int:
        return sum(self.relationship_types.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "branch": self.branch or None,
            "total_features": self.total_features,
            "total_files": self.total_files,
            "feature_counts": dict(self.counts),
            "relationships": {
                "total": self.total_relationships,
                "by_type": dict(self.relationship_types),
            },
            "active_features": [f.summary() for f in self.active_features],
            "recent_changes": [f.summary() for f in self.recent_changes],
        }


def build_status_report(
    repository: FeatureRepository,
    git: Optional[GitRepository] = None,
    *,
    window: timedelta = RECENT_WINDOW,
    limit: int = RECENT_LIMIT,
    now: Optional[datetime] = None,
) -> StatusReport:
    """Summarize the stored features.

    ``active_features`` are the ones a commit on the current branch would
    touch (the same lookup ``fogit commit`` uses). Without ``git`` or on a
    detached HEAD the branch is left empty and no active features are
    reported. Recent changes are features modified within ``window``,
    newest first, capped at ``limit``.
    """
    features = repository.list()
    report = StatusReport(total_features=len(features))
    report.counts = {state.value: 0 for state in FeatureState}

    rel_types: Counter = Counter()
    for feature in features:
        report.counts[feature.state.value] += 1
        report.total_files += len(feature.files)
        rel_types.update(r.type for r in feature.relationships)
    report.relationship_types = dict(sorted(rel_types.items()))

    if git is not None:
        try:
            report.branch = git.current_branch()
        except GitError:
            report.branch = ""
    if report.branch:
        report.active_features = FeatureFinder(repository).find_all_for_branch(report.branch)

    cutoff = (now or utc_now()) - window
    recent = [f for f in features if f.modified_at is not None and f.modified_at > cutoff]
    recent.sort(key=lambda f: f.last_modified, reverse=True)
    report.recent_changes = recent[:limit]
    return report


def describe_recent(feature: Feature) -> str:
    """One-line text rendering used by ``fogit status``."""
    stamp = format_iso8601(feature.modified_at) if feature.modified_at else "-"
    return f"{feature.name} [{feature.state}] {stamp}"


__all__ = ["StatusReport", "build_status_report", "describe_recent"]
