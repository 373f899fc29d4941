"""MediaWiki/Fandom scrape engine."""

from __future__ import annotations

from .enumerator import PageListingError, WikiScrapeError, list_pages
from .extractor import ADVANCED_RULES, BASELINE_RULES, ExtractionRules, fetch_page, html_to_text
from .filters import compile_filter, drop_locale_subpages
from .models import MIN_TEXT_LENGTH, PageRef, ScrapedPage, ScrapeTarget
from .presets import FANDOM, MEDIAWIKI, PRESETS, RetryPolicy, ScrapeConfig
from .resolver import resolve_fandom_url, resolve_mediawiki_url
from .scraper import perform_scrape

__all__ = [
    "ADVANCED_RULES",
    "BASELINE_RULES",
    "FANDOM",
    "MEDIAWIKI",
    "MIN_TEXT_LENGTH",
    "PRESETS",
    "ExtractionRules",
    "PageListingError",
    "PageRef",
    "RetryPolicy",
    "ScrapeConfig",
    "ScrapeTarget",
    "ScrapedPage",
    "WikiScrapeError",
    "compile_filter",
    "drop_locale_subpages",
    "fetch_page",
    "html_to_text",
    "list_pages",
    "perform_scrape",
    "resolve_fandom_url",
    "resolve_mediawiki_url",
]
