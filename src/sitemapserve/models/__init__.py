from __future__ import annotations

from sitemapserve.models.cache import CacheEntry
from sitemapserve.models.entry import SitemapEntry, coerce_entry

__all__ = [
    # entry
    "SitemapEntry",
    "coerce_entry",
    # cache
    "CacheEntry",
]
