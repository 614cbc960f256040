"""Cache utilities for test isolation."""
from __future__ import annotations


def reset_fogit_caches() -> None:
    """Reset global state that would otherwise leak between tests."""
    from fogit.core.config.cache import clear_all_caches
    from fogit.core.logging import reset_logging

    clear_all_caches()
    reset_logging()
