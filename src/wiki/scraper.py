"""Scrape orchestrator: enumerate once, then fetch pages with a worker pool."""

from __future__ import annotations

import asyncio
import logging
import random
import re

import httpx

from .client import DEFAULT_USER_AGENT, LISTING_TIMEOUT, PAGE_TIMEOUT, create_client
from .enumerator import list_pages
from .events import EventCallback, ProgressTracker, emit_event, progress_step
from .extractor import ADVANCED_RULES, ExtractionRules, fetch_page
from .models import PageRef, ScrapedPage
from .presets import ScrapeConfig

logger = logging.getLogger(__name__)

_TRANSIENT_STATUSES = frozenset({502, 503})
# Connection resets and timeouts surface as these in httpx.
_TRANSIENT_ERRORS = (
    httpx.ReadError,
    httpx.WriteError,
    httpx.RemoteProtocolError,
    httpx.TimeoutException,
)
# Per-page errors are only logged when parallelism is low enough to read them.
_QUIET_CONCURRENCY = 5


def _status_of(exc: Exception) -> int | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


def is_transient(exc: Exception) -> bool:
    """True for errors worth a short fixed retry (502/503, resets, timeouts)."""
    return _status_of(exc) in _TRANSIENT_STATUSES or isinstance(exc, _TRANSIENT_ERRORS)


async def random_delay(min_delay: float, max_delay: float) -> None:
    """Sleep a uniformly random time in ``[min_delay, max_delay]`` seconds."""
    if min_delay == 0 and max_delay == 0:
        return
    await asyncio.sleep(random.uniform(min_delay, max_delay))


async def scrape_page(
    client: httpx.AsyncClient,
    api_url: str,
    page: PageRef,
    config: ScrapeConfig,
    rules: ExtractionRules = ADVANCED_RULES,
    page_timeout: float = PAGE_TIMEOUT,
) -> ScrapedPage | None:
    """Fetch and extract one page, retrying rate limits and transient errors.

    A 429 backs off exponentially from ``rate_limit_base_delay``; 502/503,
    connection resets and timeouts wait ``transient_delay``. Any other error
    abandons the page. Never raises for per-page failures.
    """
    policy = config.retry
    for attempt in range(1, policy.max_attempts + 1):
        await random_delay(config.min_delay, config.max_delay)
        try:
            return await fetch_page(client, api_url, page.title, rules, page_timeout)
        except Exception as exc:
            status = _status_of(exc)
            last_attempt = attempt >= policy.max_attempts

            if status == 429:
                if last_attempt:
                    break
                wait = policy.rate_limit_delay(attempt)
                logger.warning(
                    "rate limited, retrying",
                    extra={"title": page.title, "attempt": attempt, "retry_in": wait},
                )
                await asyncio.sleep(wait)
            elif is_transient(exc):
                if last_attempt:
                    break
                logger.debug(
                    "transient error, retrying",
                    extra={"title": page.title, "attempt": attempt, "status": status, "error": type(exc).__name__},
                )
                await asyncio.sleep(policy.transient_delay)
            else:
                if config.concurrency < _QUIET_CONCURRENCY:
                    logger.error(
                        "page fetch failed",
                        extra={"title": page.title, "status": status, "error": str(exc)},
                    )
                return None

    logger.debug("giving up on page", extra={"title": page.title, "attempts": policy.max_attempts})
    return None


async def scrape_pages(
    client: httpx.AsyncClient,
    api_url: str,
    pages: list[PageRef],
    config: ScrapeConfig,
    rules: ExtractionRules = ADVANCED_RULES,
    page_timeout: float = PAGE_TIMEOUT,
    on_event: EventCallback | None = None,
    cancel: asyncio.Event | None = None,
) -> list[ScrapedPage]:
    """Drain *pages* with ``config.concurrency`` workers.

    Results are in completion order. When *cancel* is set, workers stop
    taking new pages and in-flight ones finish.
    """
    queue: asyncio.Queue[PageRef] = asyncio.Queue()
    for page in pages:
        queue.put_nowait(page)

    results: list[ScrapedPage] = []
    tracker = ProgressTracker(total=len(pages), step=progress_step(config.concurrency))

    async def worker() -> None:
        while cancel is None or not cancel.is_set():
            try:
                page = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            scraped = await scrape_page(client, api_url, page, config, rules, page_timeout)
            if scraped is not None:
                results.append(scraped)
            if tracker.record(scraped=scraped is not None):
                logger.info("scrape progress", extra=tracker.snapshot())
                await emit_event(on_event, "progress", tracker.snapshot())

    workers = [asyncio.create_task(worker()) for _ in range(min(config.concurrency, len(pages)))]
    try:
        await asyncio.gather(*workers)
    finally:
        for task in workers:
            if not task.done():
                task.cancel()

    if cancel is not None and cancel.is_set():
        logger.info("scrape cancelled", extra=tracker.snapshot())
    return results


async def perform_scrape(
    api_url: str,
    config: ScrapeConfig,
    title_filter: re.Pattern[str] | None = None,
    *,
    rules: ExtractionRules = ADVANCED_RULES,
    client: httpx.AsyncClient | None = None,
    user_agent: str = DEFAULT_USER_AGENT,
    page_timeout: float = PAGE_TIMEOUT,
    listing_timeout: float = LISTING_TIMEOUT,
    on_event: EventCallback | None = None,
    cancel: asyncio.Event | None = None,
) -> list[ScrapedPage]:
    """Scrape every page of the wiki behind *api_url*.

    Raises:
        PageListingError: If the page list cannot be fetched. Individual
            page failures never fail the scrape.
    """
    logger.info(
        "scrape started",
        extra={
            "api_url": api_url,
            "preset": config.name,
            "concurrency": config.concurrency,
            "min_delay": config.min_delay,
            "max_delay": config.max_delay,
            "auto_filter_langs": config.auto_filter_langs,
            "max_attempts": config.retry.max_attempts,
        },
    )

    if client is None:
        async with create_client(
            user_agent=user_agent,
            max_connections=config.concurrency,
            timeout=listing_timeout,
        ) as owned:
            return await _run(owned, api_url, config, title_filter, rules, page_timeout, on_event, cancel)
    return await _run(client, api_url, config, title_filter, rules, page_timeout, on_event, cancel)


async def _run(
    client: httpx.AsyncClient,
    api_url: str,
    config: ScrapeConfig,
    title_filter: re.Pattern[str] | None,
    rules: ExtractionRules,
    page_timeout: float,
    on_event: EventCallback | None,
    cancel: asyncio.Event | None,
) -> list[ScrapedPage]:
    pages = await list_pages(client, api_url, config, title_filter)
    await emit_event(on_event, "listed", {"pages": len(pages)})
    if cancel is not None and cancel.is_set():
        return []

    logger.info("starting parsing", extra={"api_url": api_url, "pages": len(pages)})
    results = await scrape_pages(client, api_url, pages, config, rules, page_timeout, on_event, cancel)
    logger.info("scrape finished", extra={"api_url": api_url, "pages": len(pages), "scraped": len(results)})
    return results
