"""Sitemap, sitemap index, and document-set builders.

Pure business logic: takes URL entries and a base, returns rendered XML.
No knowledge of the cache, the middleware, or I/O.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

import structlog

from sitemapserve.errors import ErrorCode, SitemapError
from sitemapserve.models.entry import coerce_entry, describe_entry
from sitemapserve.renderer import render_document
from sitemapserve.resolver import parse_base, to_absolute

if TYPE_CHECKING:
    from sitemapserve.models.entry import SitemapEntry
    from sitemapserve.resolver import BaseOrigin

log = structlog.get_logger()

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
IMAGE_NAMESPACE = "http://www.google.com/schemas/sitemap-image/1.1"

MAX_SITEMAP_LENGTH = 50_000  # Max URLs in one sitemap (sitemaps.org protocol)
SITEMAP_INDEX_PATH = "/sitemap.xml"


def today_utc() -> date:
    return datetime.now(UTC).date()


def format_date(value: date | str) -> str:
    """Format a lastmod value as ``YYYY-MM-DD``; strings pass through."""
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date().isoformat()
    return value.isoformat()


def is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def validate_size(size: object) -> int:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise SitemapError(
            ErrorCode.INVALID_SIZE,
            f"Argument `size` must be a positive integer, got {size!r}",
        )
    return size


def _url_element(entry: SitemapEntry, base: BaseOrigin, today: date) -> dict[str, Any]:
    element: dict[str, Any] = {"loc": to_absolute(entry.url, base)}

    if entry.last_mod is True:
        element["lastmod"] = format_date(today)
    elif entry.last_mod is not None and entry.last_mod is not False:
        element["lastmod"] = format_date(entry.last_mod)

    if entry.change_freq is not None:
        element["changefreq"] = entry.change_freq

    if entry.images:
        element["image:image"] = [
            {"image:loc": to_absolute(image, base)} for image in entry.images
        ]

    return element


def build_sitemap(
    entries: Sequence[object],
    base: str | BaseOrigin,
    *,
    today: date | None = None,
) -> str:
    """Render one ``<urlset>`` document.

    Every entry is validated first; a single malformed entry fails the whole
    document with SitemapError(INVALID_ENTRY).
    """
    parsed = parse_base(base)
    today = today or today_utc()

    coerced = [coerce_entry(raw) for raw in entries]
    urls = [_url_element(entry, parsed, today) for entry in coerced]

    namespaces: dict[str | None, str] = {None: SITEMAP_NAMESPACE}
    if any(entry.images for entry in coerced):
        namespaces["image"] = IMAGE_NAMESPACE

    try:
        return render_document({"urlset": {"url": urls}}, namespaces)
    except ValueError as exc:
        # lxml rejects control characters; re-render singly to name the culprit
        raw = _first_unrenderable(entries, urls, namespaces)
        raise SitemapError(
            ErrorCode.INVALID_ENTRY,
            f"Invalid sitemap url entry, not XML compatible: {describe_entry(raw)}",
        ) from exc


def _first_unrenderable(
    entries: Sequence[object],
    urls: list[dict[str, Any]],
    namespaces: dict[str | None, str],
) -> object:
    for raw, url in zip(entries, urls, strict=True):
        try:
            render_document({"urlset": {"url": url}}, namespaces)
        except ValueError:
            return raw
    return None


def build_sitemap_index(
    paths: Sequence[str],
    base: str | BaseOrigin,
    *,
    today: date | None = None,
) -> str:
    """Render a ``<sitemapindex>`` listing each child sitemap path.

    Every child gets today's date as its lastmod: the chunk was just
    regenerated, whatever the freshness of its source data.
    """
    parsed = parse_base(base)
    lastmod = format_date(today or today_utc())

    sitemaps = [{"loc": to_absolute(path, parsed), "lastmod": lastmod} for path in paths]
    return render_document({"sitemapindex": {"sitemap": sitemaps}}, {None: SITEMAP_NAMESPACE})


def build_sitemaps(
    entries: Sequence[object],
    base: str | BaseOrigin,
    size: int = MAX_SITEMAP_LENGTH,
    *,
    today: date | None = None,
) -> dict[str, str]:
    """Build the full document set, keyed by served path.

    Up to ``size`` entries are served directly at ``/sitemap.xml``. Beyond
    that, ``/sitemap.xml`` becomes an index over ``/sitemap-0.xml``,
    ``/sitemap-1.xml``, ... each holding at most ``size`` entries in input
    order.
    """
    if not is_sequence(entries):
        raise SitemapError(
            ErrorCode.INVALID_ARGUMENT,
            f"Argument `entries` must be a sequence of URL entries, got {type(entries).__name__}",
        )
    parsed = parse_base(base)
    size = validate_size(size)
    today = today or today_utc()

    if len(entries) <= size:
        sitemaps = {SITEMAP_INDEX_PATH: build_sitemap(entries, parsed, today=today)}
    else:
        chunks: dict[str, str] = {}
        for i, start in enumerate(range(0, len(entries), size)):
            chunks[f"/sitemap-{i}.xml"] = build_sitemap(
                entries[start : start + size], parsed, today=today
            )
        index = build_sitemap_index(list(chunks), parsed, today=today)
        sitemaps = {SITEMAP_INDEX_PATH: index, **chunks}

    log.debug("sitemaps_built", url_count=len(entries), document_count=len(sitemaps))
    return sitemaps
