"""Absolute URL resolution against a configured base origin.

Pure business logic: no I/O, no knowledge of the cache or middleware.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit

from sitemapserve.errors import ErrorCode, SitemapError


@dataclass(frozen=True)
class BaseOrigin:
    """A parsed base URL: ``scheme://host`` plus a path prefix.

    ``path`` never ends with a slash; it is ``""`` for a bare origin.
    """

    origin: str
    path: str

    @property
    def href(self) -> str:
        return self.origin + (self.path or "/")


def parse_base(base: str | BaseOrigin) -> BaseOrigin:
    """Parse and validate a base URL. Raises SitemapError on failure."""
    if isinstance(base, BaseOrigin):
        return base
    if not isinstance(base, str):
        raise SitemapError(ErrorCode.INVALID_ARGUMENT, "Argument `base` must be a string")

    parts = urlsplit(base)
    if not parts.scheme or not parts.netloc:
        raise SitemapError(
            ErrorCode.INVALID_BASE,
            f"Argument `base` must be an absolute URL, got {base!r}",
        )
    return BaseOrigin(origin=f"{parts.scheme}://{parts.netloc}", path=parts.path.rstrip("/"))


def to_absolute(url: str, base: str | BaseOrigin) -> str:
    """Resolve a site-relative path under the base path.

    Absolute URLs are returned unchanged. ``"/sitemap-0.xml"`` under a base of
    ``https://example.com/cars/sitemap/`` becomes
    ``https://example.com/cars/sitemap/sitemap-0.xml``. An empty string
    resolves to the base path itself.
    """
    if url and not url.startswith("/"):
        return url
    parsed = parse_base(base)
    return urljoin(parsed.origin, (parsed.path + url) or "/")
