"""Standalone sitemap server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Import the configured URL source
- Build the Starlette app wrapped in the sitemap middleware
- Start uvicorn
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
import uvicorn
from starlette.applications import Starlette
from uvicorn.importer import ImportFromStringError, import_from_string

from sitemapserve import __version__
from sitemapserve.config import Settings
from sitemapserve.errors import ErrorCode, SitemapError
from sitemapserve.middleware import sitemap_middleware

if TYPE_CHECKING:
    from sitemapserve.protocols import UrlSource

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def load_url_source(import_string: str) -> UrlSource:
    """Import a ``"module:attribute"`` URL source. Raises SitemapError on failure."""
    try:
        source = import_from_string(import_string)
    except ImportFromStringError as exc:
        raise SitemapError(
            ErrorCode.INVALID_ARGUMENT,
            f"Cannot import URL source {import_string!r}: {exc}",
        ) from exc
    if not callable(source):
        raise SitemapError(
            ErrorCode.INVALID_ARGUMENT,
            f"URL source {import_string!r} is not callable",
        )
    return source


def create_app(settings: Settings, get_urls: UrlSource | None = None) -> Starlette:
    """Build the ASGI app: sitemaps in front, 404 for everything else."""
    base = settings.sitemap.base
    if not base:
        raise SitemapError(ErrorCode.INVALID_ARGUMENT, "Setting `sitemap.base` is required")

    if get_urls is None:
        if not settings.sitemap.url_source:
            raise SitemapError(
                ErrorCode.INVALID_ARGUMENT, "Setting `sitemap.url_source` is required"
            )
        get_urls = load_url_source(settings.sitemap.url_source)

    middleware = sitemap_middleware(
        get_urls,
        base,
        size=settings.sitemap.size,
        max_age=settings.sitemap.max_age_seconds,
    )
    return Starlette(middleware=[middleware])


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def run_http_server(settings: Settings) -> None:
    """Start the sitemap server over HTTP."""
    _setup_logging(settings)
    app = create_app(settings)

    log.info(
        "server_starting",
        version=__version__,
        host=settings.server.host,
        port=settings.server.port,
        base=settings.sitemap.base,
    )

    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # Disable uvicorn's default logging; structlog handles it
    )


def main() -> None:
    run_http_server(Settings())


if __name__ == "__main__":
    main()
