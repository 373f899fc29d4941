"""Service layer tests: target building and SSE streaming."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from src.api.service import build_config, build_target, stream_scrape
from src.config import Settings
from src.wiki import PageListingError, ScrapedPage


def test_build_target_fandom():
    target = build_target("fandom", "https://naruto.fandom.com/wiki/Konoha", "/konoha/")
    assert target.api_url == "https://naruto.fandom.com/api.php"
    assert target.title_filter is not None
    assert target.title_filter.search("konoha")


def test_build_target_mediawiki_without_filter():
    target = build_target("mediawiki", "wiki.example.org", "")
    assert target.api_url == "https://wiki.example.org/api.php"
    assert target.title_filter is None


def test_build_config_applies_max_attempts():
    config = build_config("mediawiki", Settings(max_attempts=3))
    assert config.name == "mediawiki"
    assert config.retry.max_attempts == 3
    assert config.retry.rate_limit_base_delay == 5.0


async def _collect(gen) -> list[tuple[str, dict]]:
    return [(item["event"], json.loads(item["data"])) async for item in gen]


@pytest.mark.asyncio
async def test_stream_emits_progress_and_result():
    async def fake_scrape(api_url, config, title_filter, *, on_event, cancel, **kwargs):
        await on_event("listed", {"pages": 1})
        await on_event("progress", {"completed": 1, "total": 1, "scraped": 1})
        return [ScrapedPage(title="Konoha", content="K" * 120)]

    with patch("src.api.service.perform_scrape", new=AsyncMock(side_effect=fake_scrape)):
        events = await _collect(stream_scrape(Settings(), "fandom", "naruto", ""))

    names = [name for name, _ in events]
    assert names == ["started", "listed", "progress", "result", "done"]
    assert events[0][1] == {"api_url": "https://naruto.fandom.com/api.php", "preset": "fandom"}
    assert events[3][1] == {"pages": [{"title": "Konoha", "content": "K" * 120}]}


@pytest.mark.asyncio
async def test_stream_reports_listing_failure():
    error = PageListingError("Failed to fetch page list: boom")
    with patch("src.api.service.perform_scrape", new=AsyncMock(side_effect=error)):
        events = await _collect(stream_scrape(Settings(), "mediawiki", "https://wiki.example.org", ""))

    assert events[-1] == ("error", {"message": "Failed to fetch page list: boom"})
