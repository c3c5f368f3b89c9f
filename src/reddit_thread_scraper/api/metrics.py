"""Prometheus metrics for the Reddit thread scraper.

All metrics are module-level singletons registered on the default
``REGISTRY``.

Metrics defined here:

  http_requests_total{method, path, status}
      Counter: HTTP requests handled by the FastAPI application.

  http_request_duration_seconds{method, path}
      Histogram: HTTP request latency in seconds.

  thread_fetch_attempts_total{outcome}
      Counter: upstream Reddit requests; ``accepted`` when the body looked
      like JSON, ``rejected`` when it was HTML or empty.

  thread_scrapes_total{result}
      Counter: ``/api/scrape`` outcomes: ``success``, ``unexpected``, or the
      name of the raised ``ThreadFetchError`` subclass.

Usage::

    from reddit_thread_scraper.api.metrics import thread_scrapes_total
    thread_scrapes_total.labels(result="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by middleware in main.py)
# ---------------------------------------------------------------------------

http_requests_total: Counter = Counter(
    "http_requests_total",
    "HTTP requests handled by the FastAPI application.",
    labelnames=["method", "path", "status"],
)

http_request_duration_seconds: Histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds.",
    labelnames=["method", "path"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# ---------------------------------------------------------------------------
# Scraping metrics
# ---------------------------------------------------------------------------

thread_fetch_attempts_total: Counter = Counter(
    "thread_fetch_attempts_total",
    "Upstream Reddit fetch attempts by outcome.",
    labelnames=["outcome"],
)

thread_scrapes_total: Counter = Counter(
    "thread_scrapes_total",
    "Thread scrape requests by result.",
    labelnames=["result"],
)


# ---------------------------------------------------------------------------
# Response helper
# ---------------------------------------------------------------------------


def get_metrics_response() -> tuple[bytes, str]:
    """Generate a Prometheus text-format metrics response.

    Returns:
        A tuple of (body_bytes, content_type_string) suitable for constructing
        a FastAPI ``Response`` object.
    """
    from prometheus_client import CONTENT_TYPE_LATEST, generate_latest  # noqa: PLC0415

    return generate_latest(), CONTENT_TYPE_LATEST
