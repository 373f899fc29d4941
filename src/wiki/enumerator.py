"""Page enumeration via ``list=allpages`` with continuation handling."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

import httpx
from pydantic import ValidationError

from .filters import apply_filter, drop_locale_subpages
from .models import AllPagesResponse, ContinuationToken, PageRef
from .presets import ScrapeConfig

logger = logging.getLogger(__name__)

LISTING_PARAMS: dict[str, Any] = {
    "action": "query",
    "list": "allpages",
    "aplimit": 500,
    "apfilterredir": "nonredirects",
    "format": "json",
}

_DISCOVERY_LOG_EVERY = 2000


class WikiScrapeError(Exception):
    """Base error for scrape failures surfaced to the caller."""


class PageListingError(WikiScrapeError):
    """The wiki's page list could not be obtained; the scrape is aborted."""


async def fetch_all_titles(
    client: httpx.AsyncClient,
    api_url: str,
    listing_delay: float = 0.0,
) -> list[str]:
    """Walk every ``allpages`` batch and return titles in request order.

    Raises:
        PageListingError: On any transport, HTTP or decoding failure. Listing
            is not retried.
    """
    titles: list[str] = []
    continuation: ContinuationToken | None = None

    try:
        while True:
            params = {**LISTING_PARAMS, **(continuation or {})}
            if listing_delay > 0:
                await asyncio.sleep(listing_delay)

            resp = await client.get(api_url, params=params)
            resp.raise_for_status()
            data = AllPagesResponse.model_validate(resp.json())

            batch = data.titles()
            titles.extend(batch)
            if batch and len(titles) % _DISCOVERY_LOG_EVERY == 0:
                logger.info("pages discovered", extra={"api_url": api_url, "count": len(titles)})

            continuation = data.continue_
            if not continuation:
                break
    except (httpx.HTTPError, ValidationError, ValueError) as exc:
        raise PageListingError(f"Failed to fetch page list: {exc}") from exc

    return titles


async def list_pages(
    client: httpx.AsyncClient,
    api_url: str,
    config: ScrapeConfig,
    title_filter: re.Pattern[str] | None = None,
) -> list[PageRef]:
    """Enumerate all pages of the wiki, then apply the title filter.

    Without an explicit filter, locale subpages are dropped when the
    preset enables ``auto_filter_langs``.
    """
    logger.info("fetching page list", extra={"api_url": api_url})
    titles = await fetch_all_titles(client, api_url, config.listing_delay)
    discovered = len(titles)

    if title_filter is None and config.auto_filter_langs:
        titles = drop_locale_subpages(titles)
        logger.info(
            "auto-filtered language subpages",
            extra={"discovered": discovered, "retained": len(titles)},
        )
    elif title_filter is not None:
        titles = apply_filter(titles, title_filter)
        logger.info(
            "filtered pages",
            extra={"discovered": discovered, "retained": len(titles), "filter": title_filter.pattern},
        )
    else:
        logger.info("total pages to parse", extra={"discovered": discovered, "retained": discovered})

    return [PageRef(title=t) for t in titles]
