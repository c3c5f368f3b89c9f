"""Async HTTP fetcher for Reddit thread JSON with a single retry.

Uses ``httpx`` for all HTTP requests.  Reddit intermittently answers the
``.json`` endpoints with an HTML interstitial or an empty body; such a
response triggers one more attempt after a short pause.  Whatever the second
attempt returns is handed to the response validator unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from reddit_thread_scraper.api.metrics import thread_fetch_attempts_total
from reddit_thread_scraper.core.exceptions import UpstreamRequestError
from reddit_thread_scraper.scraper.config import FETCH_ATTEMPTS, REQUEST_HEADERS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------


@dataclass
class FetchResult:
    """Outcome of the last upstream attempt.

    Attributes:
        status_code: HTTP status code of the final response.
        reason_phrase: HTTP reason phrase of the final response.
        text: Full decoded response body.
        final_url: URL after following redirects.
        attempts: Number of requests made (1 or 2).
    """

    status_code: int
    reason_phrase: str
    text: str
    final_url: str
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


# ---------------------------------------------------------------------------
# Acceptance check
# ---------------------------------------------------------------------------


def _looks_acceptable(text: str) -> bool:
    """Return ``True`` if the body is worth validating without a retry.

    Only the shape is sniffed: a non-empty body that does not open with
    ``<`` is accepted even if it later fails to parse as JSON.
    """
    return bool(text) and not text.strip().startswith("<")


def build_request_headers(user_agent: str) -> dict[str, str]:
    """Return the fixed upstream request headers with the given user agent."""
    return {"User-Agent": user_agent, **REQUEST_HEADERS}


# ---------------------------------------------------------------------------
# Public fetch function
# ---------------------------------------------------------------------------


async def fetch_thread_json(
    url: str,
    *,
    client: httpx.AsyncClient,
    user_agent: str,
    timeout: float,
    retry_delay: float,
) -> FetchResult:
    """Fetch a thread's ``.json`` URL, retrying once on an HTML or empty body.

    Status codes are not inspected here; a 404 with a JSON body is accepted
    and left for :mod:`reddit_thread_scraper.scraper.response_validator`.

    Args:
        url: Normalized JSON endpoint URL.
        client: Open :class:`httpx.AsyncClient`.
        user_agent: ``User-Agent`` header value.
        timeout: Timeout in seconds for each attempt.
        retry_delay: Seconds to sleep before the second attempt.

    Returns:
        A :class:`FetchResult` for the last attempt made.

    Raises:
        UpstreamRequestError: On timeout or any transport-level failure.
    """
    headers = build_request_headers(user_agent)
    attempt = 1

    while True:
        try:
            response = await client.get(
                url,
                headers=headers,
                timeout=timeout,
                follow_redirects=True,
            )
        except httpx.TimeoutException as exc:
            logger.warning("fetcher: timeout fetching %s (attempt %d)", url, attempt)
            raise UpstreamRequestError("request timed out", url=url) from exc
        except httpx.RequestError as exc:
            logger.warning("fetcher: request error for %s: %s", url, exc)
            raise UpstreamRequestError(str(exc) or type(exc).__name__, url=url) from exc

        result = FetchResult(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            text=response.text,
            final_url=str(response.url),
            attempts=attempt,
        )

        if _looks_acceptable(result.text):
            thread_fetch_attempts_total.labels(outcome="accepted").inc()
            logger.info(
                "fetcher: HTTP %d for %s (attempt %d, body_len=%d)",
                result.status_code,
                url,
                attempt,
                len(result.text),
            )
            return result

        thread_fetch_attempts_total.labels(outcome="rejected").inc()
        logger.info(
            "fetcher: HTML or empty body from %s (attempt %d, status=%d)",
            url,
            attempt,
            result.status_code,
        )
        if attempt >= FETCH_ATTEMPTS:
            return result

        await asyncio.sleep(retry_delay)
        attempt += 1
