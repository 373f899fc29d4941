"""Data models for the wiki scrape pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

MIN_TEXT_LENGTH = 100

# Opaque pagination cursor echoed back on the next listing request.
ContinuationToken = dict[str, str]


@dataclass(frozen=True)
class ScrapeTarget:
    """Resolved API endpoint plus the optional compiled title filter."""

    api_url: str
    title_filter: re.Pattern[str] | None = None


@dataclass(frozen=True)
class PageRef:
    """A page discovered by the listing API."""

    title: str


@dataclass
class ScrapedPage:
    """A single wiki article reduced to plain text."""

    title: str
    content: str


# --- Upstream MediaWiki API responses ---


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class AllPagesEntry(_ApiModel):
    title: str


class AllPagesQuery(_ApiModel):
    allpages: list[AllPagesEntry] = []


class AllPagesResponse(_ApiModel):
    """``action=query&list=allpages`` response."""

    query: AllPagesQuery | None = None
    continue_: ContinuationToken | None = Field(default=None, alias="continue")

    def titles(self) -> list[str]:
        if self.query is None:
            return []
        return [entry.title for entry in self.query.allpages]


class ParsedText(_ApiModel):
    star: str | None = Field(default=None, alias="*")


class ParseResult(_ApiModel):
    title: str | None = None
    text: ParsedText | None = None


class ParseResponse(_ApiModel):
    """``action=parse&prop=text`` response."""

    parse: ParseResult | None = None

    def html(self) -> str | None:
        if self.parse is None or self.parse.text is None:
            return None
        return self.parse.text.star or None
