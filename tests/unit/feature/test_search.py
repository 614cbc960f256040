from __future__ import annotations

import pytest

from fogit.core.feature.models import Feature
from fogit.core.feature.search import find_similar, similarity, token_similarity


def _features(*names: str) -> list[Feature]:
    return [Feature.new(name) for name in names]


def test_similarity_is_case_insensitive() -> None:
    assert similarity("Login", "login") == 100.0
    assert similarity("", "login") == 0.0


def test_token_similarity_is_jaccard() -> None:
    assert token_similarity("user login", "login user") == 100.0
    assert token_similarity("user login", "user logout") == pytest.approx(100.0 / 3)


def test_find_similar_ranks_best_first() -> None:
    features = _features("User Login", "User Logout", "Billing")
    matches = find_similar("user logn", features, min_similarity=60)
    assert [m.feature.name for m in matches][:2] == ["User Login", "User Logout"]
    assert all(m.feature.name != "Billing" for m in matches)
    assert matches[0].matched_on == "name"


def test_find_similar_matches_description() -> None:
    feature = Feature.new("Auth", description="password reset flow")
    matches = find_similar("password reset", [feature], min_similarity=60)
    assert len(matches) == 1
    assert matches[0].matched_on == "description"


def test_find_similar_caps_results() -> None:
    features = _features("alpha one", "alpha two", "alpha three", "alpha four")
    assert len(find_similar("alpha", features, min_similarity=10, max_suggestions=2)) == 2
    assert find_similar("alpha", features, min_similarity=10, max_suggestions=0) == []


def test_match_to_dict() -> None:
    feature = Feature.new("Search")
    (match,) = find_similar("Search", [feature])
    assert match.to_dict() == {
        "id": feature.id,
        "name": "Search",
        "score": 100.0,
        "matched_on": "name",
    }
