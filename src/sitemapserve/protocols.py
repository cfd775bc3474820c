"""Protocol interfaces for swappable components.

The middleware references these protocols, not the concrete implementations,
so tests can drive it with lightweight in-memory doubles.
"""

from __future__ import annotations

from collections.abc import Awaitable, Mapping, Sequence
from typing import Any, Protocol


class UrlSource(Protocol):
    """Caller-supplied producer of the full URL list.

    May be a coroutine function or a plain function; an awaitable result is
    awaited before use.
    """

    def __call__(self) -> Awaitable[Sequence[Any]] | Sequence[Any]: ...


class Clock(Protocol):
    """Monotonic seconds source used for TTL bookkeeping."""

    def __call__(self) -> float: ...


class SitemapCacheProtocol(Protocol):
    """Interface for the refresh cache the middleware reads through."""

    async def get(self) -> Mapping[str, str]: ...
