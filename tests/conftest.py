"""Fixtures — fake MediaWiki API backed by ``httpx.MockTransport``."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from src.wiki.client import create_client


class FakeWiki:
    """In-memory ``api.php`` serving ``list=allpages`` and ``action=parse``.

    *batches* are returned one per listing request, chained with
    ``apcontinue`` tokens. *failures* maps a title to status codes served
    (in order) before the page's real content.
    """

    def __init__(
        self,
        batches: list[list[str]],
        pages: dict[str, str] | None = None,
        failures: dict[str, list[int]] | None = None,
        listing_status: int = 200,
    ) -> None:
        self.batches = batches
        self.pages = pages or {}
        self.failures = {k: list(v) for k, v in (failures or {}).items()}
        self.listing_status = listing_status
        self.listing_requests: list[dict[str, str]] = []
        self.parse_requests: list[str] = []

    def _listing(self, params: dict[str, str]) -> httpx.Response:
        self.listing_requests.append(params)
        if self.listing_status != 200:
            return httpx.Response(self.listing_status, text="listing unavailable")
        index = int(params.get("apcontinue", "0"))
        body: dict[str, Any] = {
            "batchcomplete": "",
            "query": {"allpages": [{"pageid": i, "ns": 0, "title": t} for i, t in enumerate(self.batches[index])]},
        }
        if index + 1 < len(self.batches):
            body["continue"] = {"apcontinue": str(index + 1), "continue": "-||"}
        return httpx.Response(200, json=body)

    def _parse(self, title: str) -> httpx.Response:
        self.parse_requests.append(title)
        queued = self.failures.get(title)
        if queued:
            return httpx.Response(queued.pop(0), text="error")
        if title not in self.pages:
            return httpx.Response(
                200,
                json={"error": {"code": "missingtitle", "info": "The page you specified doesn't exist."}},
            )
        return httpx.Response(
            200,
            json={"parse": {"title": title, "pageid": 1, "text": {"*": self.pages[title]}}},
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        params = dict(request.url.params)
        if params.get("action") == "query":
            return self._listing(params)
        return self._parse(params["page"])

    def client(self) -> httpx.AsyncClient:
        return create_client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def make_wiki():
    """Factory for :class:`FakeWiki` instances."""
    return FakeWiki
