"""Feature domain model.

A feature's lifecycle state is never stored. It is derived from the
timestamps of its current (greatest) version:

- ``open``: ``created_at == modified_at`` and no ``closed_at``
- ``in-progress``: modified after creation, no ``closed_at``
- ``closed``: ``closed_at`` is set
"""
from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from fogit.core.exceptions import FeatureStateError
from fogit.core.utils.time import format_iso8601, parse_iso8601, parse_optional_iso8601, utc_now

BRANCH_METADATA_KEY = "branch"
PRIORITY_METADATA_KEY = "priority"
DEFAULT_PRIORITY = "medium"
VALID_PRIORITIES = ("low", "medium", "high", "critical")
INITIAL_VERSION = "1"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_SEMVER = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


class FeatureState(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    CLOSED = "closed"

    def __str__(self) -> str:
        return self.value


class VersionIncrement(str, Enum):
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


def version_sort_key(key: str) -> Tuple[int, int, int, int, str]:
    """Ordering key for version strings.

    Simple keys (``"3"``) compare as ``3.0.0``; semantic keys (``"1.2.0"``)
    compare component-wise. Unparseable keys sort first, then by text.
    """
    if key.isdigit():
        return (1, int(key), 0, 0, key)
    m = _SEMVER.match(key)
    if m:
        major, minor, patch = (int(g) for g in m.groups())
        return (1, major, minor, patch, key)
    return (0, 0, 0, 0, key)


def increment_version(current: str, version_format: str, increment: VersionIncrement) -> str:
    """Compute the version after ``current``.

    Semantic format bumps the requested component (a simple ``"n"`` counts
    as ``n.0.0``). Simple format adds one for minor/major and leaves patch
    unchanged.

    Raises:
        ValueError: If ``current`` cannot be parsed.
    """
    increment = VersionIncrement(increment)
    if version_format == "semantic":
        m = _SEMVER.match(current)
        if m:
            major, minor, patch = (int(g) for g in m.groups())
        elif current.isdigit():
            major, minor, patch = int(current), 0, 0
        else:
            raise ValueError(f"invalid version format: {current}")

        if increment is VersionIncrement.PATCH:
            patch += 1
        elif increment is VersionIncrement.MINOR:
            minor, patch = minor + 1, 0
        else:
            major, minor, patch = major + 1, 0, 0
        return f"{major}.{minor}.{patch}"

    if not current.isdigit():
        raise ValueError(f"invalid simple version: {current}")
    if increment is VersionIncrement.PATCH:
        return current
    return str(int(current) + 1)


@dataclass
class FeatureVersion:
    created_at: datetime
    modified_at: datetime
    closed_at: Optional[datetime] = None
    branch: str = ""
    notes: str = ""
    authors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "created_at": format_iso8601(self.created_at),
            "modified_at": format_iso8601(self.modified_at),
        }
        if self.closed_at is not None:
            data["closed_at"] = format_iso8601(self.closed_at)
        if self.branch:
            data["branch"] = self.branch
        if self.authors:
            data["authors"] = list(self.authors)
        if self.notes:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeatureVersion":
        created = parse_iso8601(data["created_at"])
        modified = parse_optional_iso8601(data.get("modified_at")) or created
        return cls(
            created_at=created,
            modified_at=modified,
            closed_at=parse_optional_iso8601(data.get("closed_at")),
            branch=str(data.get("branch") or ""),
            notes=str(data.get("notes") or ""),
            authors=[str(a) for a in data.get("authors") or []],
        )


@dataclass
class Relationship:
    type: str
    target_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    target_name: str = ""
    description: str = ""
    created_at: datetime = field(default_factory=utc_now)
    version_constraint: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "target_id": self.target_id,
            "target_name": self.target_name,
            "created_at": format_iso8601(self.created_at),
        }
        if self.description:
            data["description"] = self.description
        if self.version_constraint:
            data["version_constraint"] = dict(self.version_constraint)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relationship":
        created = parse_optional_iso8601(data.get("created_at")) or utc_now()
        return cls(
            id=str(data.get("id") or uuid.uuid4()),
            type=str(data["type"]),
            target_id=str(data["target_id"]),
            target_name=str(data.get("target_name") or ""),
            description=str(data.get("description") or ""),
            created_at=created,
            version_constraint=data.get("version_constraint") or None,
        )


@dataclass
class Feature:
    """A tracked unit of work with one or more versions."""

    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    description: str = ""
    tags: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    relationships: List[Relationship] = field(default_factory=list)
    versions: Dict[str, FeatureVersion] = field(default_factory=dict)
    files: List[str] = field(default_factory=list)

    @classmethod
    def new(
        cls,
        name: str,
        *,
        description: str = "",
        priority: str = DEFAULT_PRIORITY,
        now: Optional[datetime] = None,
    ) -> "Feature":
        """Create a feature in the ``open`` state with version ``"1"``."""
        if not name or not name.strip():
            raise ValueError("feature name cannot be empty")
        ts = now or utc_now()
        return cls(
            name=name.strip(),
            description=description,
            metadata={PRIORITY_METADATA_KEY: priority},
            versions={INITIAL_VERSION: FeatureVersion(created_at=ts, modified_at=ts)},
        )

    # ---------- versions & state ----------

    @property
    def current_version_key(self) -> Optional[str]:
        if not self.versions:
            return None
        return max(self.versions, key=version_sort_key)

    @property
    def current_version(self) -> Optional[FeatureVersion]:
        key = self.current_version_key
        return self.versions[key] if key is not None else None

    @property
    def state(self) -> FeatureState:
        version = self.current_version
        if version is None:
            return FeatureState.OPEN
        if version.closed_at is not None:
            return FeatureState.CLOSED
        if version.created_at == version.modified_at:
            return FeatureState.OPEN
        return FeatureState.IN_PROGRESS

    @property
    def is_closed(self) -> bool:
        return self.state is FeatureState.CLOSED

    @property
    def created_at(self) -> Optional[datetime]:
        version = self.current_version
        return version.created_at if version else None

    @property
    def modified_at(self) -> Optional[datetime]:
        version = self.current_version
        return version.modified_at if version else None

    @property
    def closed_at(self) -> Optional[datetime]:
        version = self.current_version
        return version.closed_at if version else None

    @property
    def last_modified(self) -> datetime:
        """``modified_at`` for ordering; the epoch for records without versions."""
        return self.modified_at or EPOCH

    def touch(self, now: Optional[datetime] = None) -> None:
        """Record activity: set the current version's ``modified_at`` to now (UTC)."""
        version = self.current_version
        if version is not None:
            version.modified_at = now or utc_now()

    def close(self, now: Optional[datetime] = None) -> None:
        """Close the current version (``closed_at = modified_at = now``)."""
        version = self.current_version
        if version is None:
            raise FeatureStateError(f"feature '{self.name}' has no version to close")
        ts = now or utc_now()
        version.closed_at = ts
        version.modified_at = ts

    def clear_closed(self) -> None:
        """Undo :meth:`close` on the current version (merge abort)."""
        version = self.current_version
        if version is not None:
            version.closed_at = None

    def reopen(self, current_key: str, new_key: str, branch: str = "", notes: str = "") -> None:
        """Start ``new_key`` as an ``open`` version of a closed feature.

        Raises:
            FeatureStateError: If the feature is not closed or ``new_key`` exists.
        """
        if self.state is not FeatureState.CLOSED:
            raise FeatureStateError(
                f"can only reopen closed features ('{self.name}' is {self.state})",
                context={"feature_id": self.id, "state": str(self.state)},
            )
        if new_key in self.versions:
            raise FeatureStateError(
                f"version {new_key} of '{self.name}' already exists",
                context={"feature_id": self.id, "version": new_key},
            )
        now = utc_now()
        previous = self.versions.get(current_key)
        if previous is not None and previous.closed_at is None:
            previous.closed_at = now
        self.versions[new_key] = FeatureVersion(
            created_at=now,
            modified_at=now,
            branch=branch,
            notes=notes,
        )

    # ---------- metadata ----------

    @property
    def branch(self) -> str:
        """Branch bound via metadata (empty when unbound)."""
        return str(self.metadata.get(BRANCH_METADATA_KEY) or "")

    @branch.setter
    def branch(self, value: str) -> None:
        if value:
            self.metadata[BRANCH_METADATA_KEY] = value
        else:
            self.metadata.pop(BRANCH_METADATA_KEY, None)

    @property
    def priority(self) -> str:
        return str(self.metadata.get(PRIORITY_METADATA_KEY) or "")

    def add_tag(self, tag: str) -> None:
        if tag and tag not in self.tags:
            self.tags.append(tag)

    def add_file(self, path: str) -> bool:
        """Link ``path`` once; returns True when newly linked."""
        if path in self.files:
            return False
        self.files.append(path)
        self.touch()
        return True

    def add_relationship(self, rel: Relationship, *, touch: bool = True) -> None:
        """Append ``rel``.

        Raises:
            ValueError: For self-references, empty targets or duplicates
                (same type and target).
        """
        if not rel.target_id:
            raise ValueError("relationship target ID cannot be empty")
        if rel.target_id == self.id:
            raise ValueError("a feature cannot relate to itself")
        for existing in self.relationships:
            if existing.type == rel.type and existing.target_id == rel.target_id:
                raise ValueError(f"duplicate {rel.type} relationship to {rel.target_id}")
        self.relationships.append(rel)
        if touch:
            self.touch()

    def validate(self) -> None:
        if not self.name:
            raise ValueError("feature name cannot be empty")
        if self.priority and self.priority not in VALID_PRIORITIES:
            raise ValueError(f"invalid priority: {self.priority}")

    # ---------- serialization ----------

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.description:
            data["description"] = self.description
        if self.tags:
            data["tags"] = list(self.tags)
        if self.versions:
            data["versions"] = {k: v.to_dict() for k, v in self.versions.items()}
        if self.relationships:
            data["relationships"] = [r.to_dict() for r in self.relationships]
        if self.files:
            data["files"] = list(self.files)
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Feature":
        if not isinstance(data, dict) or not data.get("id") or not data.get("name"):
            raise ValueError("feature record requires 'id' and 'name'")
        versions = {
            str(k): FeatureVersion.from_dict(v)
            for k, v in (data.get("versions") or {}).items()
        }
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=str(data.get("description") or ""),
            tags=[str(t) for t in data.get("tags") or []],
            metadata=dict(data.get("metadata") or {}),
            relationships=[Relationship.from_dict(r) for r in data.get("relationships") or []],
            versions=versions,
            files=[str(f) for f in data.get("files") or []],
        )

    def summary(self) -> Dict[str, Any]:
        """Compact JSON-friendly view used by the CLI."""
        return {
            "id": self.id,
            "name": self.name,
            "state": str(self.state),
            "version": self.current_version_key,
            "branch": self.branch,
            "modified_at": format_iso8601(self.modified_at) if self.modified_at else None,
        }


__all__ = [
    "BRANCH_METADATA_KEY",
    "DEFAULT_PRIORITY",
    "Feature",
    "FeatureState",
    "FeatureVersion",
    "Relationship",
    "VersionIncrement",
    "increment_version",
    "version_sort_key",
]
