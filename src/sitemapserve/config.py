"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables  (SITEMAPSERVE__SITEMAP__BASE=https://example.com)
  3. sitemapserve.yaml      (searched in cwd, then platform config dir)
  4. Hardcoded defaults

The config file is optional. Only ``sitemap.base`` and ``sitemap.url_source``
have no usable default, and only the standalone server needs them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, NonNegativeFloat, PositiveInt
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from sitemapserve.builder import MAX_SITEMAP_LENGTH
from sitemapserve.cache import SITEMAP_MAX_AGE_SECONDS


def _find_config_file() -> str | None:
    """Return the path of the first sitemapserve.yaml found, or None."""
    candidates = [
        Path("sitemapserve.yaml"),
        Path(platformdirs.user_config_dir("sitemapserve")) / "sitemapserve.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class SitemapSettings(BaseModel):
    base: str | None = None  # e.g. https://example.com or https://example.com/blog/
    url_source: str | None = None  # "package.module:get_urls"
    size: PositiveInt = MAX_SITEMAP_LENGTH
    max_age_seconds: NonNegativeFloat = SITEMAP_MAX_AGE_SECONDS


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: SITEMAPSERVE__SERVER__PORT=9090
        env_prefix="SITEMAPSERVE__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    sitemap: SitemapSettings = SitemapSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
