"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from src.wiki.client import DEFAULT_USER_AGENT, LISTING_TIMEOUT, PAGE_TIMEOUT


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    # Empty disables X-API-Key checks on the scrape routes.
    api_key: str = ""

    user_agent: str = DEFAULT_USER_AGENT
    page_timeout_seconds: float = PAGE_TIMEOUT
    listing_timeout_seconds: float = LISTING_TIMEOUT
    max_attempts: int = Field(default=10, ge=1)
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
