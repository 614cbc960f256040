"""Text helpers: slugs for file and branch names, tokenization."""
from __future__ import annotations

import re
import unicodedata
from typing import List

DEFAULT_SLUG_MAX_LENGTH = 100

_SEPARATORS = re.compile(r"[\s._]+")
_NON_SLUG = re.compile(r"[^a-z0-9-]+")
_NON_SLUG_WITH_SLASHES = re.compile(r"[^a-z0-9/-]+")
_MULTI_HYPHEN = re.compile(r"-{2,}")


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def slugify(
    text: str,
    *,
    max_length: int = DEFAULT_SLUG_MAX_LENGTH,
    allow_slashes: bool = False,
    normalize_unicode: bool = False,
    fallback: str = "",
) -> str:
    """Convert ``text`` to a lowercase, hyphen-separated slug.

    Separators (whitespace, ``.`` and ``_``) become hyphens, everything
    outside ``[a-z0-9-]`` (plus ``/`` when ``allow_slashes``) is dropped,
    hyphen runs collapse and the result is capped at ``max_length``.

    Examples:
        >>> slugify("User Authentication")
        'user-authentication'
        >>> slugify("Café Menu", normalize_unicode=True)
        'cafe-menu'
        >>> slugify("!!!", fallback="unnamed")
        'unnamed'
    """
    slug = text or ""
    if normalize_unicode:
        slug = _strip_accents(slug)

    slug = slug.lower()
    slug = _SEPARATORS.sub("-", slug)
    slug = (_NON_SLUG_WITH_SLASHES if allow_slashes else _NON_SLUG).sub("", slug)
    slug = _MULTI_HYPHEN.sub("-", slug)
    slug = slug.strip("-")

    limit = max_length if max_length > 0 else DEFAULT_SLUG_MAX_LENGTH
    if len(slug) > limit:
        slug = slug[:limit].rstrip("-")

    if not slug and fallback:
        slug = fallback
    return slug


def tokenize(text: str) -> List[str]:
    """Tokenize text into lowercase words."""
    return re.findall(r"[a-z0-9]+", (text or "").lower())


__all__ = ["DEFAULT_SLUG_MAX_LENGTH", "slugify", "tokenize"]
