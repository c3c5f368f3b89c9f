"""Constants for fetching and cleaning Reddit thread JSON."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------

#: Total number of upstream attempts per thread (the first try plus one retry).
FETCH_ATTEMPTS: int = 2

#: Headers sent with every upstream request, apart from ``User-Agent``
#: which comes from settings.
REQUEST_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Cache-Control": "no-cache",
}

#: Host substring replaced by the mirror host when a URL cannot be parsed.
CANONICAL_REDDIT_HOST: str = "www.reddit.com"

JSON_SUFFIX: str = ".json"

# ---------------------------------------------------------------------------
# Response validation
# ---------------------------------------------------------------------------

#: Lower-cased phrases that mark a non-JSON body as "thread does not exist".
THREAD_MISSING_PHRASES: tuple[str, ...] = (
    "page not found",
    "not found",
    "the page",
    "not available",
)

DOCTYPE_MARKER: str = "<!DOCTYPE"

#: Number of body characters quoted in a JSON parse error.
PARSE_ERROR_PREVIEW_CHARS: int = 100

# ---------------------------------------------------------------------------
# Reddit payload
# ---------------------------------------------------------------------------

#: Author name Reddit substitutes for removed accounts.
DELETED_AUTHOR: str = "[deleted]"

LISTING_KIND: str = "Listing"

#: Reddit type prefix for comments.
COMMENT_KIND: str = "t1"
