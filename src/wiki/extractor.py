"""Content extraction: rendered wiki HTML to clean plain text.

The pipeline is pure and per page: prune non-content nodes, drop headings
left without a body, convert with ``html2text`` and normalize whitespace.
Pages whose text ends up shorter than ``MIN_TEXT_LENGTH`` are discarded.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass

import html2text
import httpx
from bs4 import BeautifulSoup, Tag

from .client import PAGE_TIMEOUT
from .models import MIN_TEXT_LENGTH, ParseResponse, ScrapedPage

logger = logging.getLogger(__name__)

_HEADING_TAGS = ["h2", "h3", "h4", "h5", "h6"]
_HEADING_RE = re.compile(r"^h[2-6]$")
# MediaWiki 1.43+ wraps section headings in <div class="mw-heading">.
_HEADING_WRAPPER_CLASS = "mw-heading"

_EDIT_TOKEN_RE = re.compile(r"\[edit\]", re.IGNORECASE)
_SPACES_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")
# Escapes html2text puts in front of list-like line starts and backslashes.
_LINE_START_ESCAPE_RE = re.compile(r"^(\s*\d*)\\([.+\-])", re.MULTILINE)
_BACKSLASH_ESCAPE_RE = re.compile(r"\\(\\)(?=[\\`*_{}\[\]()#+\-.!])")
_HEADING_MARK_RE = re.compile(r"^#{1,6} ", re.MULTILINE)


@dataclass(frozen=True)
class ExtractionRules:
    """Selectors pruned before conversion and tags the converter skips."""

    remove_selectors: tuple[str, ...]
    skip_tags: tuple[str, ...] = ("img", "table")
    min_length: int = MIN_TEXT_LENGTH


BASELINE_SELECTORS: tuple[str, ...] = (
    ".portable-infobox",
    ".navbox",
    ".toc",
    ".wds-tabs",
    ".mw-editsection",
    "style",
    "script",
    ".aside",
    ".printfooter",
    "#catlinks",
    ".gallery",
    ".wikia-gallery",
    ".messagebox",
    ".notice",
    ".error",
    "table",
    "figure",
    "video",
)

ADVANCED_SELECTORS: tuple[str, ...] = BASELINE_SELECTORS + (
    ".infobox",
    ".reference",
    ".mw-jump-link",
    "#mw-navigation",
    ".ambox",
)

BASELINE_RULES = ExtractionRules(remove_selectors=BASELINE_SELECTORS)
ADVANCED_RULES = ExtractionRules(remove_selectors=ADVANCED_SELECTORS)


def _section_node(heading: Tag) -> Tag:
    parent = heading.parent
    if isinstance(parent, Tag) and _HEADING_WRAPPER_CLASS in (parent.get("class") or []):
        return parent
    return heading


def _is_heading_node(node: Tag) -> bool:
    if _HEADING_RE.match(node.name or ""):
        return True
    return _HEADING_WRAPPER_CLASS in (node.get("class") or [])


def prune_nodes(soup: BeautifulSoup, selectors: tuple[str, ...]) -> None:
    """Remove every element matching any of *selectors*."""
    if not selectors:
        return
    for el in soup.select(", ".join(selectors)):
        # Nested matches go away with their ancestor.
        if not el.decomposed:
            el.decompose()


def prune_dangling_headings(soup: BeautifulSoup) -> None:
    """Remove headings followed by nothing or by another heading.

    Evaluated in document order against the live tree, so a run of empty
    headings collapses entirely.
    """
    for heading in soup.find_all(_HEADING_TAGS):
        if heading.decomposed:
            continue
        node = _section_node(heading)
        nxt = node.find_next_sibling()
        if nxt is None or _is_heading_node(nxt):
            node.decompose()


def _make_converter() -> html2text.HTML2Text:
    converter = html2text.HTML2Text()
    converter.body_width = 0
    converter.ignore_links = True
    converter.ignore_images = True
    converter.ignore_emphasis = True
    converter.unicode_snob = True
    return converter


def normalize_text(text: str) -> str:
    text = _EDIT_TOKEN_RE.sub("", text)
    text = _HEADING_MARK_RE.sub("", text)
    text = _LINE_START_ESCAPE_RE.sub(r"\1\2", text)
    text = _BACKSLASH_ESCAPE_RE.sub(r"\1", text)
    text = _SPACES_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def html_to_text(html: str, rules: ExtractionRules = ADVANCED_RULES) -> str:
    """Reduce rendered article HTML to normalized plain text."""
    soup = BeautifulSoup(html, "html.parser")
    prune_nodes(soup, rules.remove_selectors)
    prune_dangling_headings(soup)
    prune_nodes(soup, rules.skip_tags)
    return normalize_text(_make_converter().handle(str(soup)))


def extract_page(
    title: str,
    html: str,
    rules: ExtractionRules = ADVANCED_RULES,
) -> ScrapedPage | None:
    """Build a :class:`ScrapedPage`, or ``None`` if the text is too short."""
    text = html_to_text(html, rules)
    if len(text) < rules.min_length:
        logger.debug("page content too short, discarding", extra={"title": title, "length": len(text)})
        return None
    return ScrapedPage(title=title, content=text)


def parse_params(title: str) -> dict[str, str | int]:
    return {
        "action": "parse",
        "page": title,
        "prop": "text",
        "format": "json",
        "disablelimitreport": 1,
        "disableeditsection": 1,
        "redirects": 1,
    }


async def fetch_page(
    client: httpx.AsyncClient,
    api_url: str,
    title: str,
    rules: ExtractionRules = ADVANCED_RULES,
    timeout: float = PAGE_TIMEOUT,
) -> ScrapedPage | None:
    """Fetch the rendered HTML of *title* and extract its text.

    *timeout* caps the whole request, including a slowly streamed body.
    Extraction runs in a worker thread so parsing large pages does not
    stall the other in-flight requests.

    Returns ``None`` for pages without parsed text (missing or special
    pages) and for pages below the minimum length.

    Raises:
        httpx.HTTPStatusError: If the API answers with a 4xx/5xx status.
        httpx.TransportError: On connection failures.
        httpx.TimeoutException: If the request takes longer than *timeout*.
    """
    try:
        resp = await asyncio.wait_for(
            client.get(api_url, params=parse_params(title), timeout=timeout),
            timeout=timeout,
        )
    except asyncio.TimeoutError as exc:
        raise httpx.ReadTimeout(f"page fetch exceeded {timeout}s: {title}") from exc
    resp.raise_for_status()
    html = ParseResponse.model_validate(resp.json()).html()
    if html is None:
        logger.debug("no parsed text, skipping", extra={"title": title})
        return None
    return await asyncio.to_thread(extract_page, title, html, rules)
