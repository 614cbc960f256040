"""Fuzzy feature suggestions for not-found lookups.

Deterministic scoring on a 0-100 scale:

1. Name similarity (difflib ratio)
2. Description similarity
3. Token overlap (Jaccard) between query and name

The first signal that clears ``min_similarity`` wins for each feature.
"""
from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Iterable, List, Set

from fogit.core.utils.text import tokenize

from .models import Feature


@dataclass(frozen=True)
class FeatureMatch:
    feature: Feature
    score: float
    matched_on: str

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.feature.id,
            "name": self.feature.name,
            "score": round(self.score, 1),
            "matched_on": self.matched_on,
        }


def similarity(a: str, b: str) -> float:
    a = (a or "").strip().lower()
    b = (b or "").strip().lower()
    if a == b:
        return 100.0
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a, b).ratio() * 100.0


def _token_set(text: str) -> Set[str]:
    return set(tokenize(text))


def token_similarity(a: str, b: str) -> float:
    if (a or "").strip().lower() == (b or "").strip().lower():
        return 100.0
    ta, tb = _token_set(a), _token_set(b)
    if not ta or not tb:
        return 0.0
    return len(ta & tb) / len(ta | tb) * 100.0


def find_similar(
    query: str,
    features: Iterable[Feature],
    *,
    min_similarity: float = 60.0,
    max_suggestions: int = 5,
) -> List[FeatureMatch]:
    """Rank ``features`` against ``query``; best first, capped at ``max_suggestions``."""
    matches: List[FeatureMatch] = []
    for feature in features:
        score = similarity(query, feature.name)
        if score >= min_similarity:
            matches.append(FeatureMatch(feature, score, "name"))
            continue

        if feature.description:
            score = similarity(query, feature.description)
            if score >= min_similarity:
                matches.append(FeatureMatch(feature, score, "description"))
                continue

        score = token_similarity(query, feature.name)
        if score >= min_similarity:
            matches.append(FeatureMatch(feature, score, "tokens"))

    matches.sort(key=lambda m: (-m.score, m.feature.name.lower(), m.feature.id))
    return matches[: max(max_suggestions, 0)]


__all__ = ["FeatureMatch", "find_similar", "similarity", "token_similarity"]
