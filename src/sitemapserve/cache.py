"""In-process sitemap cache with single-flight refresh.

Each SitemapCache owns one slot that moves between three states:

- Empty: nothing cached (startup, or the last refresh failed).
- Pending: a refresh task is running; every ``get()`` awaits that same task.
- Fresh: a completed document set younger than ``max_age`` is returned as is.

Once a Fresh entry expires, the next ``get()`` starts a new refresh and all
callers wait for it. Stale documents are never served. Failures are not
cached: the slot returns to Empty and the next ``get()`` retries.

A URL source that never resolves stalls every pending ``get()``; no timeout
is imposed here.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import structlog

from sitemapserve.builder import MAX_SITEMAP_LENGTH, build_sitemaps, is_sequence, validate_size
from sitemapserve.errors import ErrorCode, SitemapError
from sitemapserve.models.cache import CacheEntry
from sitemapserve.resolver import parse_base

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sitemapserve.protocols import Clock, UrlSource
    from sitemapserve.resolver import BaseOrigin

log = structlog.get_logger()

SITEMAP_MAX_AGE_SECONDS = 24 * 60 * 60


class SitemapCache:
    """Memoises the full sitemap document set for ``max_age`` seconds.

    Implements SitemapCacheProtocol. All argument validation happens here,
    at construction time, never per request.
    """

    def __init__(
        self,
        get_urls: UrlSource,
        base: str | BaseOrigin,
        *,
        size: int = MAX_SITEMAP_LENGTH,
        max_age: float = SITEMAP_MAX_AGE_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        if not callable(get_urls):
            raise SitemapError(ErrorCode.INVALID_ARGUMENT, "Argument `get_urls` must be callable")
        if isinstance(max_age, bool) or not isinstance(max_age, (int, float)) or max_age < 0:
            raise SitemapError(
                ErrorCode.INVALID_ARGUMENT,
                f"Argument `max_age` must be a non-negative number of seconds, got {max_age!r}",
            )
        self._get_urls = get_urls
        self._base = parse_base(base)
        self._size = validate_size(size)
        self._max_age = float(max_age)
        self._clock = clock

        self._entry: CacheEntry | None = None
        self._pending: asyncio.Task[Mapping[str, str]] | None = None

    @property
    def base(self) -> BaseOrigin:
        return self._base

    async def get(self) -> Mapping[str, str]:
        """Return the current document set, refreshing it when missing or expired."""
        entry = self._entry
        if entry is not None and entry.is_fresh(self._clock()):
            return MappingProxyType(entry.documents)

        if self._pending is None:
            self._entry = None
            self._pending = asyncio.get_running_loop().create_task(self._refresh())

        # Shielded so one cancelled request never cancels the shared refresh
        return await asyncio.shield(self._pending)

    async def _load_urls(self) -> Sequence[Any]:
        try:
            result = self._get_urls()
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            raise SitemapError(ErrorCode.SOURCE_FAILED, f"URL source failed: {exc}") from exc

        if not is_sequence(result):
            raise SitemapError(
                ErrorCode.SOURCE_NOT_SEQUENCE,
                f"URL source must return a sequence of URL entries, got {type(result).__name__}",
            )
        return result

    async def _refresh(self) -> Mapping[str, str]:
        refresh_log = log.bind(base=self._base.href)
        refresh_log.info("sitemap_refresh_started")
        started = self._clock()
        try:
            urls = await self._load_urls()
            # Large builds run off the event loop so unrelated requests keep flowing
            documents = await asyncio.to_thread(build_sitemaps, urls, self._base, self._size)
            self._entry = CacheEntry(
                documents=documents,
                created_at=self._clock(),
                max_age=self._max_age,
            )
        except Exception:
            refresh_log.warning("sitemap_refresh_error", exc_info=True)
            raise
        finally:
            self._pending = None

        refresh_log.info(
            "sitemap_refresh_complete",
            url_count=len(urls),
            document_count=len(documents),
            duration_seconds=round(self._clock() - started, 3),
        )
        return MappingProxyType(self._entry.documents)
