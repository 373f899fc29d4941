"""Request/response Pydantic models."""

from typing import Literal

from pydantic import BaseModel


class FandomScrapeRequest(BaseModel):
    fandom: str
    filter: str | None = None


class MediaWikiScrapeRequest(BaseModel):
    url: str
    filter: str | None = None


class StreamScrapeRequest(BaseModel):
    source: Literal["fandom", "mediawiki"] = "fandom"
    wiki: str
    filter: str | None = None


class ScrapedPageOut(BaseModel):
    title: str
    content: str


class PluginInfo(BaseModel):
    id: str
    name: str
    description: str


PLUGIN_INFO = PluginInfo(
    id="fandom",
    name="Wiki API Scraper",
    description="Scraper for MediaWiki/Fandom pages.",
)
