"""Turn a user-supplied Reddit thread URL into its ``.json`` API URL.

``https://www.reddit.com/r/python/comments/abc/title/?utm_source=share``
becomes ``https://old.reddit.com/r/python/comments/abc/title.json``.

Well-formed URLs are rebuilt from their parsed components.  Anything that
``urllib.parse`` cannot split into scheme + host falls back to plain string
surgery, so :func:`normalize_thread_url` never raises.
"""

from __future__ import annotations

import logging
import urllib.parse

from reddit_thread_scraper.scraper.config import CANONICAL_REDDIT_HOST, JSON_SUFFIX

logger = logging.getLogger(__name__)


def _with_json_suffix(path: str) -> str:
    if path.endswith("/"):
        path = path[:-1]
    if not path.endswith(JSON_SUFFIX):
        path += JSON_SUFFIX
    return path


def _normalize_parsed(url: str, mirror_host: str | None) -> str:
    """Rebuild ``url`` from its components.

    Raises:
        ValueError: If ``url`` lacks a scheme or host, or has an invalid port.
    """
    parts = urllib.parse.urlsplit(url.strip())
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"not an absolute URL: {url!r}")
    port = parts.port  # raises ValueError for a malformed port

    path = _with_json_suffix(parts.path)
    if not path.startswith("/"):
        path = "/" + path

    netloc = parts.netloc
    if mirror_host:
        netloc = mirror_host if port is None else f"{mirror_host}:{port}"

    return urllib.parse.urlunsplit((parts.scheme, netloc, path, "", ""))


def _normalize_fallback(url: str, mirror_host: str | None) -> str:
    json_url = url.split("?", 1)[0]
    if mirror_host:
        json_url = json_url.replace(CANONICAL_REDDIT_HOST, mirror_host, 1)
    if not json_url.endswith(JSON_SUFFIX):
        json_url = _with_json_suffix(json_url)
    return json_url


def normalize_thread_url(url: str, mirror_host: str | None = None) -> str:
    """Return the JSON endpoint URL for a Reddit thread URL.

    The query string and fragment are dropped, one trailing slash is removed
    from the path and ``.json`` is appended unless already present.

    Args:
        url: Thread URL as supplied by the caller.
        mirror_host: When set, replaces the URL's hostname (the port is
            kept).  Pass ``None`` or ``""`` to keep the original host.

    Returns:
        The normalized URL.  Never raises.
    """
    try:
        return _normalize_parsed(url, mirror_host)
    except ValueError as exc:
        logger.debug("url_normalizer: falling back to string handling for %r: %s", url, exc)
        return _normalize_fallback(url, mirror_host)
