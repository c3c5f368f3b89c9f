"""FastAPI application factory and entry point.

Creates the application instance, registers the request-logging middleware
and mounts the scrape router plus the ``/health`` and ``/metrics`` system
endpoints.

Usage::

    # Development server (from project root)
    uvicorn reddit_thread_scraper.api.main:app --reload

    # Production
    gunicorn reddit_thread_scraper.api.main:app -k uvicorn.workers.UvicornWorker
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from reddit_thread_scraper.api.metrics import (
    get_metrics_response,
    http_request_duration_seconds,
    http_requests_total,
)
from reddit_thread_scraper.config.settings import get_settings
from reddit_thread_scraper.core.logging_config import configure_logging, request_id_var

# ---------------------------------------------------------------------------
# Logging configuration, applied at import time so records emitted while
# the app is built are captured.  create_app() re-applies the configured level.
# ---------------------------------------------------------------------------

configure_logging("INFO")

logger = structlog.get_logger(__name__)


def _route_path(request: Request) -> str:
    """Return the matched route template, keeping metric label cardinality bounded."""
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application.

    Separated from the module-level ``app`` singleton so that tests can
    build an app after patching the environment.

    Returns:
        A fully configured ``FastAPI`` instance.
    """
    settings = get_settings()

    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        description=(
            "Fetches a Reddit thread's JSON representation and returns the post "
            "together with a flat, depth-annotated list of its comments."
        ),
        version="0.1.0",
        debug=settings.debug,
        redirect_slashes=False,
    )

    # ---- Request logging middleware ----------------------------------------

    @application.middleware("http")
    async def request_logging_middleware(
        request: Request, call_next: Callable
    ) -> Response:
        """Log every request with its status and duration and record HTTP metrics.

        Binds a unique ``request_id`` to the structlog context so that every
        log line emitted while handling the request can be correlated.
        """
        request_id = str(uuid.uuid4())
        request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("unhandled_exception", exc_info=exc)
            raise
        finally:
            elapsed = time.perf_counter() - start
            status_code = getattr(response, "status_code", 500)
            path = _route_path(request)
            http_requests_total.labels(
                method=request.method, path=path, status=str(status_code)
            ).inc()
            http_request_duration_seconds.labels(method=request.method, path=path).observe(
                elapsed
            )
            log_fn = logger.warning if status_code >= 400 else logger.info
            log_fn(
                "request_complete",
                status_code=status_code,
                elapsed_ms=round(elapsed * 1000, 2),
            )

        response.headers["X-Request-ID"] = request_id
        return response

    # ---- Routers ------------------------------------------------------------

    from reddit_thread_scraper.scraper.router import (  # noqa: PLC0415
        router as scrape_router,
        scrape_http_exception_handler,
    )

    application.include_router(scrape_router)
    application.add_exception_handler(StarletteHTTPException, scrape_http_exception_handler)

    # ---- Lifecycle events -------------------------------------------------

    @application.on_event("startup")
    async def on_startup() -> None:
        """Log application startup information."""
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            debug=settings.debug,
            log_level=settings.log_level,
            reddit_mirror_host=settings.reddit_mirror_host or None,
        )

    @application.on_event("shutdown")
    async def on_shutdown() -> None:
        """Log clean shutdown."""
        logger.info("application_shutdown")

    # ---- System endpoints -------------------------------------------------

    @application.get("/health", tags=["system"])
    async def health() -> JSONResponse:
        """Return a process-level liveness status without any upstream I/O.

        Returns:
            JSON response with ``{"status": "ok"}``.
        """
        return JSONResponse({"status": "ok"})

    if settings.metrics_enabled:

        @application.get("/metrics", tags=["system"], include_in_schema=False)
        async def metrics() -> Response:
            """Expose Prometheus metrics in the text exposition format."""
            body, content_type = get_metrics_response()
            return Response(content=body, media_type=content_type)

    return application


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

app = create_app()
"""The FastAPI application instance.

This is the ASGI callable passed to Uvicorn / Gunicorn.
"""
