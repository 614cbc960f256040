"""Timezone-aware time helpers.

Timestamps are stored as ISO 8601 strings with a ``Z`` suffix and
microsecond precision, so that values round-trip exactly through YAML and
equality between ``created_at`` and ``modified_at`` survives persistence.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_iso8601(dt: datetime) -> str:
    """Format ``dt`` as an ISO 8601 UTC string with a ``Z`` suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def parse_iso8601(value: str | datetime) -> datetime:
    """Parse an ISO 8601 timestamp into an aware UTC datetime.

    Naive values are assumed to be UTC. ``datetime`` inputs (PyYAML parses
    unquoted timestamps itself) are normalized the same way.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_optional_iso8601(value: Optional[str | datetime]) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return parse_iso8601(value)  # type: ignore[arg-type]


__all__ = [
    "utc_now",
    "format_iso8601",
    "parse_iso8601",
    "parse_optional_iso8601",
]
