"""FastAPI router for the thread scraping endpoint.

Routes:
    OPTIONS /api/scrape   CORS preflight, empty 200
    POST    /api/scrape   fetch and clean a thread: ``{"url": "..."}``
    *       /api/scrape   405, including methods the router never dispatches

Every response carries permissive CORS headers so the endpoint can be
called from any browser origin.  Failures never escape as framework
errors: each one becomes a JSON body of the form ``{"error": "..."}``.
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from reddit_thread_scraper.api.metrics import thread_scrapes_total
from reddit_thread_scraper.config.settings import Settings, get_settings
from reddit_thread_scraper.core.exceptions import ThreadFetchError
from reddit_thread_scraper.core.schemas.thread import ErrorResponse, ScrapeResponse
from reddit_thread_scraper.scraper.service import scrape_thread

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["scrape"])

SCRAPE_PATH = "/api/scrape"

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

_ROUTED_METHODS: list[str] = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

GENERIC_ERROR_MESSAGE = "An error occurred while scraping"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _json(status_code: int, content: dict[str, Any]) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def _error(status_code: int, message: str) -> JSONResponse:
    return _json(status_code, ErrorResponse(error=message).model_dump())


async def _read_url(request: Request) -> str | None:
    """Return the ``url`` member of the JSON body, or ``None`` if unusable."""
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    url = body.get("url")
    if not isinstance(url, str) or not url:
        return None
    return url


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------


@router.api_route(SCRAPE_PATH, methods=_ROUTED_METHODS, response_model=None)
async def scrape(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Fetch a Reddit thread and return its cleaned post and comments.

    Returns:
        - 200 ``{"success": true, "data": {"post": ..., "comments": [...]}}``
        - 400 ``{"error": "URL is required"}``
        - 405 ``{"error": "Method not allowed"}``
        - 500 ``{"error": "<reason>"}`` for every fetch or parse failure.
    """
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)

    if request.method != "POST":
        return _error(status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")

    url = await _read_url(request)
    if url is None:
        return _error(status.HTTP_400_BAD_REQUEST, "URL is required")

    try:
        thread = await scrape_thread(url, settings)
        response = _json(status.HTTP_200_OK, ScrapeResponse(data=thread).model_dump(mode="json"))
    except ThreadFetchError as exc:
        thread_scrapes_total.labels(result=type(exc).__name__).inc()
        logger.warning(
            "thread_scrape_failed",
            url=url,
            error_kind=type(exc).__name__,
            error=str(exc),
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
    except Exception:
        thread_scrapes_total.labels(result="unexpected").inc()
        logger.exception("thread_scrape_crashed", url=url)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)

    thread_scrapes_total.labels(result="success").inc()
    logger.info("thread_scraped", url=url, comments=len(thread.comments))
    return response


async def scrape_http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """Answer framework-level 405s on the scrape path with the endpoint's own error body.

    Methods outside ``_ROUTED_METHODS`` (``TRACE``, WebDAV verbs, ...) are
    rejected by routing before :func:`scrape` runs.  Every other HTTP
    exception keeps FastAPI's default ``{"detail": ...}`` handling.
    """
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and request.url.path == SCRAPE_PATH:
        return _error(status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")
    return await http_exception_handler(request, exc)
