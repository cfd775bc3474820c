"""Unit tests for settings loading and defaults."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sitemapserve.config import Settings, SitemapSettings


class TestDefaults:
    def test_sitemap_defaults(self) -> None:
        settings = SitemapSettings()
        assert settings.base is None
        assert settings.url_source is None
        assert settings.size == 50_000
        assert settings.max_age_seconds == 86_400

    def test_server_and_logging_defaults(self) -> None:
        settings = Settings()
        assert settings.server.port == 8080
        assert settings.logging.level == "INFO"
        assert settings.logging.format == "json"


class TestSources:
    def test_nested_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SITEMAPSERVE__SITEMAP__BASE", "https://example.com/blog/")
        monkeypatch.setenv("SITEMAPSERVE__SITEMAP__SIZE", "1000")
        monkeypatch.setenv("SITEMAPSERVE__SERVER__PORT", "9090")
        settings = Settings()
        assert settings.sitemap.base == "https://example.com/blog/"
        assert settings.sitemap.size == 1000
        assert settings.server.port == 9090

    def test_init_args_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SITEMAPSERVE__SITEMAP__SIZE", "1000")
        settings = Settings(sitemap={"size": 10})
        assert settings.sitemap.size == 10


class TestValidation:
    @pytest.mark.parametrize("size", [0, -1])
    def test_size_must_be_positive(self, size: int) -> None:
        with pytest.raises(ValidationError):
            SitemapSettings(size=size)

    def test_max_age_must_not_be_negative(self) -> None:
        with pytest.raises(ValidationError):
            SitemapSettings(max_age_seconds=-1)

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(logging={"level": "VERBOSE"})
