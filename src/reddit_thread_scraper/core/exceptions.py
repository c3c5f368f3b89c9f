"""Application-wide exception hierarchy for the Reddit thread scraper.

All custom exceptions subclass ``ThreadScraperError``.  Every failure to
turn a thread URL into a cleaned thread is a ``ThreadFetchError``; its
message is the human-readable text returned to the API caller.

Hierarchy::

    ThreadScraperError
    └── ThreadFetchError
        ├── UpstreamRequestError          (transport failure / timeout)
        ├── UpstreamHttpError             (status_code, reason_phrase)
        ├── EmptyUpstreamResponseError
        ├── UpstreamBlockedError
        ├── UpstreamUnexpectedFormatError
        ├── ThreadNotFoundError
        ├── JsonParseError                (preview)
        └── InvalidThreadStructureError
"""

from __future__ import annotations


class ThreadScraperError(Exception):
    """Base class for all thread scraper exceptions."""


# ---------------------------------------------------------------------------
# Upstream fetch / validation exceptions
# ---------------------------------------------------------------------------


class ThreadFetchError(ThreadScraperError):
    """Raised when a thread cannot be fetched, validated or parsed.

    Args:
        message: Human-readable description, safe to show to API callers.
        url: The upstream URL that was requested, when known.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class UpstreamRequestError(ThreadFetchError):
    """Raised when the request to Reddit fails at the transport level."""

    def __init__(self, reason: str, url: str | None = None) -> None:
        super().__init__(f"Failed to reach Reddit: {reason}", url=url)
        self.reason = reason


class UpstreamHttpError(ThreadFetchError):
    """Raised when Reddit answers with a non-2xx status code.

    Args:
        status_code: HTTP status returned by Reddit.
        reason_phrase: HTTP reason phrase (e.g. ``"Not Found"``).
        url: The upstream URL that was requested.
    """

    def __init__(
        self,
        status_code: int,
        reason_phrase: str,
        url: str | None = None,
    ) -> None:
        super().__init__(f"Reddit returned {status_code}: {reason_phrase}", url=url)
        self.status_code = status_code
        self.reason_phrase = reason_phrase


class EmptyUpstreamResponseError(ThreadFetchError):
    """Raised when Reddit answers with an empty or whitespace-only body."""

    def __init__(self, url: str | None = None) -> None:
        super().__init__("Reddit returned an empty response. Please try again.", url=url)


class UpstreamBlockedError(ThreadFetchError):
    """Raised when Reddit answers with an HTML page instead of JSON.

    This is almost always the anti-bot interstitial or a generic error page.
    """

    def __init__(self, url: str | None = None) -> None:
        super().__init__("Reddit blocked the request. Try again in a few seconds.", url=url)


class UpstreamUnexpectedFormatError(ThreadFetchError):
    """Raised when the body is neither JSON nor a recognisable error message."""

    def __init__(self, url: str | None = None) -> None:
        super().__init__(
            "Reddit returned an unexpected response. The post may not be accessible.",
            url=url,
        )


class ThreadNotFoundError(ThreadFetchError):
    """Raised when Reddit reports that the thread does not exist."""

    def __init__(self, url: str | None = None) -> None:
        super().__init__(
            "This Reddit post could not be found. It may have been deleted or made private.",
            url=url,
        )


class JsonParseError(ThreadFetchError):
    """Raised when a JSON-looking body fails to parse.

    Args:
        preview: The first characters of the offending body.
        url: The upstream URL that was requested.
    """

    def __init__(self, preview: str, url: str | None = None) -> None:
        super().__init__(f"Failed to parse Reddit response: {preview}...", url=url)
        self.preview = preview


class InvalidThreadStructureError(ThreadFetchError):
    """Raised when the parsed JSON is not a ``[post listing, comments listing]`` pair."""

    def __init__(self, url: str | None = None) -> None:
        super().__init__(
            "Invalid Reddit data structure. Please ensure this is a valid thread URL.",
            url=url,
        )
