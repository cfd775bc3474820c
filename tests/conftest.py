"""Shared test fixtures for the sitemapserve test suite."""

from __future__ import annotations

from datetime import date

import pytest


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def today() -> date:
    """A fixed build date so rendered output is deterministic."""
    return date(2026, 1, 15)
