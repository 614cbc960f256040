from __future__ import annotations

import pytest

from fogit.core.utils.text import slugify, tokenize


@pytest.mark.parametrize(
    "text, expected",
    [
        ("User Authentication", "user-authentication"),
        ("  leading and trailing  ", "leading-and-trailing"),
        ("a -- b", "a-b"),
        ("Hello, World!", "hello-world"),
        ("snake_case.name", "snake-case-name"),
        ("", ""),
    ],
)
def test_slugify(text: str, expected: str) -> None:
    assert slugify(text) == expected


def test_slugify_drops_accented_letters_without_normalization() -> None:
    assert slugify("Café") == "caf"
    assert slugify("Café", normalize_unicode=True) == "cafe"


def test_slugify_slashes_only_when_allowed() -> None:
    assert slugify("a/b") == "ab"
    assert slugify("a/b", allow_slashes=True) == "a/b"


def test_slugify_truncation_does_not_leave_trailing_hyphen() -> None:
    assert slugify("abcd efgh", max_length=5) == "abcd"


def test_slugify_fallback() -> None:
    assert slugify("???", fallback="unnamed") == "unnamed"
    assert slugify("???") == ""


def test_tokenize() -> None:
    assert tokenize("User-Auth v2") == ["user", "auth", "v2"]
    assert tokenize("") == []
