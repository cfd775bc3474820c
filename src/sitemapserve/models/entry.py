from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictBool,
    StrictStr,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from sitemapserve.errors import ErrorCode, SitemapError

StrictDateTime = Annotated[datetime, Strict()]
StrictDate = Annotated[date, Strict()]


class SitemapEntry(BaseModel):
    """One page location plus its optional sitemap annotations.

    A bare string entry is equivalent to ``SitemapEntry(url=...)``. Record
    entries accept either the camelCase keys (``lastMod``, ``changeFreq``)
    or their snake_case field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    url: StrictStr  # Absolute URL or site-relative path
    # True means "today"; strings pass through verbatim; dates format as YYYY-MM-DD
    last_mod: StrictBool | StrictDateTime | StrictDate | StrictStr | None = Field(
        default=None, alias="lastMod"
    )
    change_freq: StrictStr | None = Field(default=None, alias="changeFreq")
    image: StrictStr | list[StrictStr] | None = None  # One image, or several in order

    @field_validator("last_mod", "change_freq", "image", mode="wrap")
    @classmethod
    def _drop_unusable(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        """Optional annotations of the wrong type are ignored, not fatal."""
        try:
            return handler(value)
        except ValidationError:
            return None

    @property
    def images(self) -> list[str]:
        if self.image is None:
            return []
        if isinstance(self.image, str):
            return [self.image]
        return list(self.image)


def describe_entry(raw: object) -> str:
    try:
        return json.dumps(raw, default=str)
    except (TypeError, ValueError):
        return repr(raw)


def coerce_entry(raw: object) -> SitemapEntry:
    """Turn a caller-supplied URL entry into a SitemapEntry.

    Raises SitemapError(INVALID_ENTRY) naming the offending entry when it is
    neither a string nor a mapping with a string ``url``.
    """
    if isinstance(raw, SitemapEntry):
        return raw
    if isinstance(raw, str):
        return SitemapEntry(url=raw)
    if not isinstance(raw, Mapping):
        raise SitemapError(
            ErrorCode.INVALID_ENTRY,
            f"Invalid sitemap url entry, expected a string or a mapping: {describe_entry(raw)}",
        )

    try:
        return SitemapEntry.model_validate(dict(raw))
    except ValidationError as exc:
        missing_url = any(
            err["loc"] == ("url",) and err["type"] == "missing" for err in exc.errors()
        )
        reason = "missing 'url' property" if missing_url else "'url' must be a string"
        raise SitemapError(
            ErrorCode.INVALID_ENTRY,
            f"Invalid sitemap url object, {reason}: {describe_entry(raw)}",
        ) from exc
