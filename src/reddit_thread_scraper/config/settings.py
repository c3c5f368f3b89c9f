"""Application settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.
Never call ``os.getenv`` directly elsewhere in the codebase.

Usage::

    from reddit_thread_scraper.config.settings import get_settings

    settings = get_settings()
    timeout = settings.fetch_timeout_seconds
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service configuration backed by environment variables and an optional .env file.

    Every field has a default, so the service starts with an empty environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Application behaviour
    # ------------------------------------------------------------------

    app_name: str = "Reddit Thread Scraper"
    """Human-readable application name shown in the OpenAPI docs."""

    debug: bool = False
    """Enable FastAPI debug mode.  Never True in production."""

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    # ------------------------------------------------------------------
    # Upstream (Reddit) fetching
    # ------------------------------------------------------------------

    reddit_mirror_host: str = "old.reddit.com"
    """Hostname every thread URL is rewritten to before fetching.

    ``old.reddit.com`` serves the ``.json`` endpoints to anonymous clients far
    more reliably than ``www.reddit.com``.  Set to an empty string to fetch
    from whatever host the caller supplied.
    """

    user_agent: str = "Mozilla/5.0 (compatible; RedditScraper/1.0; +https://github.com)"
    """``User-Agent`` header sent with every upstream request."""

    fetch_timeout_seconds: float = Field(default=15.0, gt=0)
    """Timeout applied to each individual upstream attempt."""

    retry_delay_seconds: float = Field(default=1.0, ge=0)
    """Pause between the first and the second upstream attempt."""

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    metrics_enabled: bool = True
    """Expose Prometheus metrics at ``GET /metrics``."""


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Pydantic Settings reads the environment and .env file exactly once per
    process lifetime.  In tests, call ``get_settings.cache_clear()`` after
    patching environment variables, or override the FastAPI dependency.

    Returns:
        Settings: The validated settings object.
    """
    return Settings()
