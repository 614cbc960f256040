from __future__ import annotations

import json

from fogit.cli import OutputFormatter
from fogit.core.exceptions import FeatureNotFoundError, GitError
from fogit.core.feature import Feature
from fogit.core.feature.search import FeatureMatch


def test_success_json_includes_status(capsys) -> None:
    OutputFormatter(json_mode=True).success({"key": "a"}, "ignored", status="updated")
    assert json.loads(capsys.readouterr().out) == {"status": "updated", "key": "a"}


def test_success_text_prints_message(capsys) -> None:
    OutputFormatter().success({"key": "a"}, "Set a")
    assert capsys.readouterr().out == "Set a\n"


def test_error_json_uses_exception_code(capsys) -> None:
    OutputFormatter(json_mode=True).error(GitError("boom"))
    payload = json.loads(capsys.readouterr().err)
    assert payload == {"error": "git_error", "message": "boom"}


def test_error_json_for_plain_exceptions(capsys) -> None:
    OutputFormatter(json_mode=True).error(ValueError("bad"))
    assert json.loads(capsys.readouterr().err)["error"] == "error"


def test_error_text_lists_suggestions(capsys) -> None:
    match = FeatureMatch(feature=Feature.new("User Login"), score=82.0, matched_on="name")
    err = FeatureNotFoundError("feature not found: user lgoin", identifier="user lgoin", suggestions=[match])

    OutputFormatter().error(err)

    lines = capsys.readouterr().err.splitlines()
    assert lines[0] == "Error: feature not found: user lgoin"
    assert "  - User Login (82% match)" in lines


def test_text_helpers_are_silent_in_json_mode(capsys) -> None:
    formatter = OutputFormatter(json_mode=True)
    formatter.text_kv("Name", "x")
    formatter.text_list(["a", "b"])
    assert capsys.readouterr().out == ""


def test_fogit_error_json_payload() -> None:
    err = GitError("git push failed", returncode=128)
    assert err.to_json_error() == {
        "message": "git push failed",
        "code": "git_error",
        "context": {"returncode": 128},
    }
