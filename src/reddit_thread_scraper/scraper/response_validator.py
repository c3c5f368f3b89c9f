"""Validate a raw Reddit response and parse it into a JSON list.

Checks run in a fixed order and the first failing check raises the
matching :class:`~reddit_thread_scraper.core.exceptions.ThreadFetchError`
subclass.  The order matters: a 404 page is reported as an HTTP error, not
as HTML, and HTML is never handed to the JSON parser.
"""

from __future__ import annotations

import json
from typing import Any

from reddit_thread_scraper.core.exceptions import (
    EmptyUpstreamResponseError,
    InvalidThreadStructureError,
    JsonParseError,
    ThreadNotFoundError,
    UpstreamBlockedError,
    UpstreamHttpError,
    UpstreamUnexpectedFormatError,
)
from reddit_thread_scraper.scraper.config import (
    DOCTYPE_MARKER,
    PARSE_ERROR_PREVIEW_CHARS,
    THREAD_MISSING_PHRASES,
)


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON.
    raise ValueError(f"non-standard JSON constant: {name}")


def _mentions_missing_thread(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in THREAD_MISSING_PHRASES)


def validate_thread_response(
    status_code: int,
    reason_phrase: str,
    text: str,
    *,
    url: str | None = None,
) -> list[Any]:
    """Return the parsed thread payload or raise a descriptive error.

    Args:
        status_code: HTTP status of the final upstream response.
        reason_phrase: HTTP reason phrase of the final upstream response.
        text: Response body.
        url: Upstream URL, attached to raised errors for logging.

    Returns:
        The decoded JSON list (at least two elements).

    Raises:
        UpstreamHttpError: Non-2xx status.
        EmptyUpstreamResponseError: Empty or whitespace-only body.
        ThreadNotFoundError: An HTML or plain-text page saying the thread
            does not exist.
        UpstreamBlockedError: Any other HTML page.
        UpstreamUnexpectedFormatError: Plain text that is not JSON.
        JsonParseError: JSON-looking body that fails to decode.
        InvalidThreadStructureError: JSON that is not a list of 2+ items.
    """
    if not 200 <= status_code < 300:
        raise UpstreamHttpError(status_code, reason_phrase, url=url)

    stripped = text.strip()
    if not stripped:
        raise EmptyUpstreamResponseError(url=url)

    if stripped.startswith("<") or DOCTYPE_MARKER in text:
        if _mentions_missing_thread(stripped):
            raise ThreadNotFoundError(url=url)
        raise UpstreamBlockedError(url=url)

    if not stripped.startswith(("[", "{")):
        if _mentions_missing_thread(stripped):
            raise ThreadNotFoundError(url=url)
        raise UpstreamUnexpectedFormatError(url=url)

    try:
        payload = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise JsonParseError(text[:PARSE_ERROR_PREVIEW_CHARS], url=url) from exc

    if not isinstance(payload, list) or len(payload) < 2:
        raise InvalidThreadStructureError(url=url)

    return payload
