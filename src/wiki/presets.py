"""Scrape presets per wiki source type."""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class RetryPolicy:
    """Per-page retry behaviour.

    ``max_attempts=1`` disables retries entirely.
    """

    max_attempts: int = 10
    rate_limit_base_delay: float = 5.0
    transient_delay: float = 2.0

    def rate_limit_delay(self, attempt: int) -> float:
        """Backoff before the next attempt after a 429 on *attempt* (1-based)."""
        return self.rate_limit_base_delay * (2 ** (attempt - 1))


@dataclass(frozen=True)
class ScrapeConfig:
    """Concurrency and pacing for one scrape. Delays are in seconds."""

    name: str
    concurrency: int
    min_delay: float
    max_delay: float
    auto_filter_langs: bool
    listing_delay: float
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def with_max_attempts(self, max_attempts: int) -> ScrapeConfig:
        return replace(self, retry=replace(self.retry, max_attempts=max_attempts))


FANDOM = ScrapeConfig(
    name="fandom",
    concurrency=30,
    min_delay=0.0,
    max_delay=0.0,
    auto_filter_langs=False,
    listing_delay=0.0,
)

# Self-hosted installs rate-limit aggressively.
MEDIAWIKI = ScrapeConfig(
    name="mediawiki",
    concurrency=2,
    min_delay=0.1,
    max_delay=0.8,
    auto_filter_langs=True,
    listing_delay=0.2,
)

PRESETS: dict[str, ScrapeConfig] = {
    "fandom": FANDOM,
    "mediawiki": MEDIAWIKI,
}
