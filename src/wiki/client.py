"""Shared ``httpx`` client for talking to a wiki's ``api.php``."""

from __future__ import annotations

import httpx

DEFAULT_USER_AGENT = "WikiScrapeService/1.0.1 (MediaWiki API scraper for RAG ingestion)"

PAGE_TIMEOUT = 15.0
LISTING_TIMEOUT = 30.0


def default_headers(user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "application/json",
        "Accept-Encoding": "gzip, deflate, br",
        "Connection": "keep-alive",
    }


def create_client(
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    max_connections: int = 30,
    timeout: float = LISTING_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build an ``AsyncClient`` sized for *max_connections* concurrent fetches."""
    return httpx.AsyncClient(
        headers=default_headers(user_agent),
        timeout=timeout,
        follow_redirects=True,
        limits=httpx.Limits(max_connections=max_connections, max_keepalive_connections=max_connections),
        transport=transport,
    )
