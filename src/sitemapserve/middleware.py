"""Pure ASGI middleware that answers sitemap requests from the refresh cache."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog
from starlette.middleware import Middleware
from starlette.responses import Response

from sitemapserve.builder import MAX_SITEMAP_LENGTH
from sitemapserve.cache import SITEMAP_MAX_AGE_SECONDS, SitemapCache
from sitemapserve.errors import ErrorCode, SitemapError

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

    from sitemapserve.protocols import SitemapCacheProtocol, UrlSource

log = structlog.get_logger()

SITEMAP_PATH_RE = re.compile(r"^/sitemap(-\d+)?\.xml$")
SITEMAP_MEDIA_TYPE = "application/xml"


class SitemapMiddleware:
    """Serve ``/sitemap.xml`` and ``/sitemap-<n>.xml`` ahead of the wrapped app.

    Requests whose path does not look like a sitemap go straight to ``app``
    without touching the cache. Sitemap-shaped paths missing from the current
    document set also fall through to ``app``. Errors from the cache are not
    caught: they propagate to the ASGI server.

    Implemented as pure ASGI (not BaseHTTPMiddleware) so that responses of
    the wrapped app are never buffered by the middleware layer.
    """

    def __init__(
        self,
        app: ASGIApp,
        get_urls: UrlSource | None = None,
        base: str | None = None,
        *,
        size: int = MAX_SITEMAP_LENGTH,
        max_age: float = SITEMAP_MAX_AGE_SECONDS,
        cache: SitemapCacheProtocol | None = None,
    ) -> None:
        if cache is None:
            if get_urls is None or base is None:
                raise SitemapError(
                    ErrorCode.INVALID_ARGUMENT,
                    "SitemapMiddleware needs either `cache` or both `get_urls` and `base`",
                )
            cache = SitemapCache(get_urls, base, size=size, max_age=max_age)
        self.app = app
        self.cache = cache

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not SITEMAP_PATH_RE.match(scope["path"]):
            await self.app(scope, receive, send)
            return

        path = scope["path"]
        sitemaps = await self.cache.get()
        document = sitemaps.get(path)
        if document is None:
            log.debug("sitemap_not_found", path=path)
            await self.app(scope, receive, send)
            return

        log.debug("sitemap_served", path=path)
        await Response(document, status_code=200, media_type=SITEMAP_MEDIA_TYPE)(
            scope, receive, send
        )


def sitemap_middleware(
    get_urls: UrlSource,
    base: str,
    *,
    size: int = MAX_SITEMAP_LENGTH,
    max_age: float = SITEMAP_MAX_AGE_SECONDS,
) -> Middleware:
    """Return a Starlette ``Middleware`` entry serving sitemaps.

    The cache is built here, so bad arguments fail immediately rather than
    when Starlette lazily assembles its middleware stack on the first request.
    """
    cache = SitemapCache(get_urls, base, size=size, max_age=max_age)
    return Middleware(SitemapMiddleware, cache=cache)
