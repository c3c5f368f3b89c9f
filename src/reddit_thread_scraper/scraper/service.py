"""Fetch-and-clean pipeline shared by the HTTP endpoint and the CLI script.

    thread URL → JSON endpoint URL → fetch (with retry) → validate → clean
"""

from __future__ import annotations

import contextlib

import httpx
import pydantic
import structlog

from reddit_thread_scraper.config.settings import Settings
from reddit_thread_scraper.core.exceptions import InvalidThreadStructureError
from reddit_thread_scraper.core.schemas.thread import CleanedThread
from reddit_thread_scraper.scraper.cleaner import clean_thread
from reddit_thread_scraper.scraper.http_fetcher import fetch_thread_json
from reddit_thread_scraper.scraper.response_validator import validate_thread_response
from reddit_thread_scraper.scraper.url_normalizer import normalize_thread_url

logger = structlog.get_logger(__name__)


async def scrape_thread(
    url: str,
    settings: Settings,
    *,
    client: httpx.AsyncClient | None = None,
) -> CleanedThread:
    """Return the cleaned thread behind a Reddit thread URL.

    Args:
        url: Thread URL as supplied by the caller.
        settings: Service settings (mirror host, user agent, timing).
        client: Optional open client.  When omitted a client is created for
            this call and closed before returning.

    Returns:
        The cleaned thread.

    Raises:
        ThreadFetchError: Any fetch, validation or structure failure.
    """
    json_url = normalize_thread_url(url, settings.reddit_mirror_host or None)
    log = logger.bind(json_url=json_url)

    async with contextlib.AsyncExitStack() as stack:
        if client is None:
            client = await stack.enter_async_context(httpx.AsyncClient())
        result = await fetch_thread_json(
            json_url,
            client=client,
            user_agent=settings.user_agent,
            timeout=settings.fetch_timeout_seconds,
            retry_delay=settings.retry_delay_seconds,
        )

    payload = validate_thread_response(
        result.status_code,
        result.reason_phrase,
        result.text,
        url=json_url,
    )

    try:
        thread = clean_thread(payload)
    except pydantic.ValidationError as exc:
        log.warning("thread_payload_invalid", errors=exc.error_count())
        raise InvalidThreadStructureError(url=json_url) from exc

    log.info("thread_cleaned", attempts=result.attempts, comments=len(thread.comments))
    return thread
