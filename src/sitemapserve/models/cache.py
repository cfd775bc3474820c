from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CacheEntry(BaseModel):
    """A computed sitemap document set and the moment it was completed."""

    model_config = ConfigDict(frozen=True)

    documents: dict[str, str]  # Served path -> rendered XML
    created_at: float  # Clock reading when the build finished
    max_age: float  # Seconds

    def is_fresh(self, now: float) -> bool:
        return now - self.created_at < self.max_age
