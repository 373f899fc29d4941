"""Service layer — turns API requests into scrape runs."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from typing import Any, AsyncGenerator, Literal

from src.api.schemas import ScrapedPageOut
from src.config import Settings
from src.wiki import (
    PRESETS,
    PageListingError,
    ScrapeConfig,
    ScrapeTarget,
    compile_filter,
    perform_scrape,
    resolve_fandom_url,
    resolve_mediawiki_url,
)

logger = logging.getLogger(__name__)

Source = Literal["fandom", "mediawiki"]

# Streaming scrapes outlive a disconnected client until in-flight pages drain.
_background_tasks: set[asyncio.Task[None]] = set()


def build_target(source: Source, wiki: str, raw_filter: str | None) -> ScrapeTarget:
    """Resolve the wiki identifier and compile the title filter."""
    if source == "fandom":
        api_url = resolve_fandom_url(wiki)
    else:
        api_url = resolve_mediawiki_url(wiki)
    return ScrapeTarget(api_url=api_url, title_filter=compile_filter(raw_filter))


def build_config(source: Source, settings: Settings) -> ScrapeConfig:
    return PRESETS[source].with_max_attempts(settings.max_attempts)


async def run_scrape(
    settings: Settings,
    source: Source,
    wiki: str,
    raw_filter: str | None,
) -> list[ScrapedPageOut]:
    """Run a full scrape and return the pages for the JSON response.

    Raises:
        PageListingError: If the wiki's page list cannot be fetched.
    """
    target = build_target(source, wiki, raw_filter)
    config = build_config(source, settings)
    pages = await perform_scrape(
        target.api_url,
        config,
        target.title_filter,
        user_agent=settings.user_agent,
        page_timeout=settings.page_timeout_seconds,
        listing_timeout=settings.listing_timeout_seconds,
    )
    logger.info("job done", extra={"api_url": target.api_url, "pages": len(pages)})
    return [ScrapedPageOut(title=p.title, content=p.content) for p in pages]


async def stream_scrape(
    settings: Settings,
    source: Source,
    wiki: str,
    raw_filter: str | None,
) -> AsyncGenerator[dict[str, str], None]:
    """Yield SSE-formatted progress events followed by the scraped pages.

    If the client disconnects, no new pages are scheduled; pages already in
    flight finish in the background.
    """
    target = build_target(source, wiki, raw_filter)
    config = build_config(source, settings)
    logger.info("streaming scrape started", extra={"api_url": target.api_url, "preset": config.name})

    queue: asyncio.Queue[tuple[str, dict[str, Any]] | None] = asyncio.Queue()
    cancel = asyncio.Event()

    async def on_event(event: str, data: dict[str, Any]) -> None:
        await queue.put((event, data))

    async def run_and_signal_done() -> None:
        try:
            pages = await perform_scrape(
                target.api_url,
                config,
                target.title_filter,
                user_agent=settings.user_agent,
                page_timeout=settings.page_timeout_seconds,
                listing_timeout=settings.listing_timeout_seconds,
                on_event=on_event,
                cancel=cancel,
            )
            logger.info("job done", extra={"api_url": target.api_url, "pages": len(pages)})
            await queue.put(("result", {"pages": [asdict(p) for p in pages]}))
            await queue.put(("done", {}))
        except PageListingError as exc:
            logger.error("page listing failed", extra={"api_url": target.api_url, "error": str(exc)})
            await queue.put(("error", {"message": str(exc)}))
        except Exception:
            logger.exception("streaming scrape failed", extra={"api_url": target.api_url})
            await queue.put(("error", {"message": "Scrape failed"}))
        finally:
            await queue.put(None)  # sentinel

    await on_event("started", {"api_url": target.api_url, "preset": config.name})
    task = asyncio.create_task(run_and_signal_done())
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)

    try:
        while True:
            item = await queue.get()
            if item is None:
                break
            event, data = item
            yield {"event": event, "data": json.dumps(data)}
    finally:
        cancel.set()
