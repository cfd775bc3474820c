"""Tests for the standalone server app factory."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest

from sitemapserve.config import Settings
from sitemapserve.errors import ErrorCode, SitemapError
from sitemapserve.server import create_app, load_url_source


async def example_urls() -> list[str]:
    return ["/", "/about"]


def _settings(**sitemap: object) -> Settings:
    return Settings(sitemap={"base": "https://example.com", **sitemap})


class TestLoadUrlSource:
    def test_imports_callable(self) -> None:
        source = load_url_source("sitemapserve.builder:today_utc")
        assert callable(source)

    def test_missing_module(self) -> None:
        with pytest.raises(SitemapError) as exc_info:
            load_url_source("no_such_module_xyz:get_urls")
        assert exc_info.value.code == ErrorCode.INVALID_ARGUMENT

    def test_bad_format(self) -> None:
        with pytest.raises(SitemapError):
            load_url_source("no-colon-here")

    def test_not_callable(self) -> None:
        with pytest.raises(SitemapError) as exc_info:
            load_url_source("sitemapserve.builder:SITEMAP_NAMESPACE")
        assert "not callable" in exc_info.value.message


class TestCreateApp:
    async def test_serves_sitemap_and_404s_the_rest(self) -> None:
        source = AsyncMock(side_effect=example_urls)
        app = create_app(_settings(), get_urls=source)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://localhost") as client:
            sitemap = await client.get("/sitemap.xml")
            other = await client.get("/robots.txt")

        assert sitemap.status_code == 200
        assert "<loc>https://example.com/about</loc>" in sitemap.text
        assert other.status_code == 404

    def test_settings_size_applied_eagerly(self) -> None:
        settings = _settings()
        settings.sitemap.size = 0
        with pytest.raises(SitemapError) as exc_info:
            create_app(settings, get_urls=AsyncMock())
        assert exc_info.value.code == ErrorCode.INVALID_SIZE

    def test_base_required(self) -> None:
        with pytest.raises(SitemapError) as exc_info:
            create_app(Settings(), get_urls=AsyncMock())
        assert "sitemap.base" in exc_info.value.message

    def test_url_source_required_without_callable(self) -> None:
        with pytest.raises(SitemapError) as exc_info:
            create_app(_settings())
        assert "sitemap.url_source" in exc_info.value.message

    async def test_url_source_from_settings(self) -> None:
        app = create_app(_settings(url_source="test_server:example_urls"))
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://localhost") as client:
            response = await client.get("/sitemap.xml")
        assert "<loc>https://example.com/</loc>" in response.text
