"""Probe, scrape and info endpoint handlers."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse
from sse_starlette.sse import EventSourceResponse

from src.api.schemas import (
    PLUGIN_INFO,
    FandomScrapeRequest,
    MediaWikiScrapeRequest,
    PluginInfo,
    ScrapedPageOut,
    StreamScrapeRequest,
)
from src.api.service import run_scrape, stream_scrape
from src.auth.dependencies import require_api_key
from src.config import Settings, get_settings
from src.wiki import PageListingError

logger = logging.getLogger(__name__)

public_router = APIRouter()
router = APIRouter(dependencies=[Depends(require_api_key)])


@public_router.post("/probe", status_code=status.HTTP_204_NO_CONTENT)
@public_router.post("/probe-mediawiki", status_code=status.HTTP_204_NO_CONTENT)
async def probe() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@public_router.get("/info", response_model=PluginInfo)
async def info() -> PluginInfo:
    return PLUGIN_INFO


@router.post("/scrape", response_model=list[ScrapedPageOut])
@router.post("/scrape-fandom", response_model=list[ScrapedPageOut])
async def scrape_fandom(
    body: FandomScrapeRequest,
    settings: Settings = Depends(get_settings),
):
    try:
        return await run_scrape(settings, "fandom", body.fandom, body.filter)
    except PageListingError as exc:
        logger.error("fandom scrape failed", extra={"fandom": body.fandom, "error": str(exc)})
        return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.post("/scrape-mediawiki", response_model=list[ScrapedPageOut])
async def scrape_mediawiki(
    body: MediaWikiScrapeRequest,
    settings: Settings = Depends(get_settings),
):
    try:
        return await run_scrape(settings, "mediawiki", body.url, body.filter)
    except PageListingError as exc:
        logger.error("mediawiki scrape failed", extra={"url": body.url, "error": str(exc)})
        return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.post("/scrape/stream")
async def scrape_stream(
    body: StreamScrapeRequest,
    settings: Settings = Depends(get_settings),
):
    return EventSourceResponse(stream_scrape(settings, body.source, body.wiki, body.filter))
