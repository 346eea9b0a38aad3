"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from keyset_paginator.core.settings.loader import get_pagination_settings

    settings = get_pagination_settings()  # First call: loads and validates
    settings = get_pagination_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_pagination_settings.cache_clear()

    Or override with custom values:
    settings = PaginationSettings(default_limit=10)
"""

from __future__ import annotations

from functools import lru_cache

from .pagination import PaginationSettings


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Get cached pagination settings.

    Returns:
        Validated and frozen PaginationSettings instance.
    """
    return PaginationSettings()
