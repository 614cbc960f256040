"""Unified CLI output formatting utilities.

Every fogit command prints through :class:`OutputFormatter`, in either JSON
or text mode.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, Optional

from fogit.core.exceptions import FeatureNotFoundError, FogitError


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Output success result.

        Args:
            data: Result data dictionary
            message: Human-readable success message (used in text mode)
            status: Status string for JSON output
        """
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: Optional[str] = None,
    ) -> None:
        """Output error result.

        ``error_code`` defaults to the exception's ``code`` for fogit errors.
        """
        msg = message or str(error)
        code = error_code or (error.code if isinstance(error, FogitError) else "error")
        if self.json_mode:
            output: Dict[str, Any] = {"error": code, "message": msg}
            if isinstance(error, FogitError) and error.context:
                output["context"] = error.context
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
            return

        print(f"Error: {msg}", file=sys.stderr)
        if isinstance(error, FeatureNotFoundError) and error.suggestions:
            print("\nDid you mean:", file=sys.stderr)
            for match in error.suggestions:
                print(f"  - {match.feature.name} ({match.score:.0f}% match)", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        """Output key-value pair in text mode."""
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")

    def text_list(self, items: Iterable[Any], prefix: str = "  - ") -> None:
        if not self.json_mode:
            for item in items:
                print(f"{prefix}{item}")


__all__ = ["OutputFormatter"]
