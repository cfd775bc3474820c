"""sitemapserve: on-demand XML sitemaps for dynamic URL sets."""

from __future__ import annotations

import warnings
from importlib.metadata import PackageNotFoundError, version

from sitemapserve.builder import build_sitemap, build_sitemap_index, build_sitemaps
from sitemapserve.cache import SitemapCache
from sitemapserve.errors import ErrorCode, SitemapError
from sitemapserve.middleware import SitemapMiddleware, sitemap_middleware
from sitemapserve.models.entry import SitemapEntry

try:
    __version__ = version("sitemapserve")
except PackageNotFoundError:
    # Source-tree execution without installed package metadata.
    warnings.warn(
        "Package metadata for 'sitemapserve' not found; using fallback version '0.0.0+unknown'.",
        RuntimeWarning,
        stacklevel=2,
    )
    __version__ = "0.0.0+unknown"

__all__ = [
    "ErrorCode",
    "SitemapCache",
    "SitemapEntry",
    "SitemapError",
    "SitemapMiddleware",
    "build_sitemap",
    "build_sitemap_index",
    "build_sitemaps",
    "sitemap_middleware",
]
