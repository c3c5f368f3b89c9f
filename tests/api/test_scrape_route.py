"""Tests for the /api/scrape endpoint (scraper/router.py).

Tests cover:
- OPTIONS preflight returns an empty 200.
- Methods other than POST/OPTIONS return 405.
- Missing, empty or malformed ``url`` returns 400.
- A successful scrape returns the cleaned thread.
- Every upstream failure becomes a 500 with a readable message.
- CORS headers are present on every response.
- The normalized URL (mirror host, ``.json``) is what gets fetched.

Upstream Reddit requests are mocked with respx; the app is driven through
FastAPI's TestClient.
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from reddit_thread_scraper.config.settings import get_settings
from tests.factories.reddit import comment, listing, sample_thread_json, thread_payload

THREAD_URL = "https://www.reddit.com/r/python/comments/1abcde/which_http_client/?share_id=x"
JSON_URL = "https://old.reddit.com/r/python/comments/1abcde/which_http_client.json"

EXPECTED_CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "POST, OPTIONS",
    "access-control-allow-headers": "Content-Type",
}


def _assert_cors(response: httpx.Response) -> None:
    for header, value in EXPECTED_CORS.items():
        assert response.headers[header] == value


def _mock_upstream(mock: respx.MockRouter, *responses: httpx.Response) -> respx.Route:
    """Mock the upstream JSON URL; a single response is served on every attempt."""
    route = mock.get(JSON_URL)
    if len(responses) == 1:
        template = responses[0]
        return route.mock(
            side_effect=lambda request: httpx.Response(
                template.status_code,
                content=template.content,
                headers=template.headers,
            )
        )
    return route.mock(side_effect=list(responses))


# ---------------------------------------------------------------------------
# Method dispatch and input validation
# ---------------------------------------------------------------------------


class TestMethodDispatch:
    def test_options_preflight(self, client: TestClient) -> None:
        response = client.options("/api/scrape")
        assert response.status_code == 200
        assert response.content == b""
        _assert_cors(response)

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "TRACE", "PROPFIND"])
    def test_other_methods_not_allowed(self, client: TestClient, method: str) -> None:
        response = client.request(method, "/api/scrape")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
        _assert_cors(response)

    def test_unknown_path_keeps_default_error(self, client: TestClient) -> None:
        response = client.request("PROPFIND", "/api/other")
        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}


class TestInputValidation:
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"url": ""},
            {"url": None},
            {"url": 123},
            {"link": THREAD_URL},
            [THREAD_URL],
        ],
    )
    def test_missing_url(self, client: TestClient, body: object) -> None:
        response = client.post("/api/scrape", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "URL is required"}
        _assert_cors(response)

    def test_non_json_body(self, client: TestClient) -> None:
        response = client.post(
            "/api/scrape",
            content=b"url=https://reddit.com",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "URL is required"}

    def test_empty_body(self, client: TestClient) -> None:
        response = client.post("/api/scrape")
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# Successful scrapes
# ---------------------------------------------------------------------------


class TestScrapeSuccess:
    def test_returns_cleaned_thread(self, client: TestClient) -> None:
        with respx.mock(assert_all_mocked=True) as mock:
            route = _mock_upstream(mock, httpx.Response(200, text=sample_thread_json()))
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert route.call_count == 1
        assert response.status_code == 200
        _assert_cors(response)
        body = response.json()
        assert body["success"] is True
        post = body["data"]["post"]
        assert post["title"] == "Hello"
        assert post["author"] == "alice"
        assert post["score"] == 5
        assert set(post) == {
            "title",
            "author",
            "content",
            "subreddit",
            "score",
            "num_comments",
            "url",
            "created_utc",
            "permalink",
        }
        assert body["data"]["comments"] == [
            {"author": "bob", "content": "hi", "score": 2, "depth": 0},
            {"author": "carol", "content": "yo", "score": 1, "depth": 1},
        ]

    def test_retry_after_blocked_page(self, client: TestClient) -> None:
        with respx.mock() as mock:
            route = _mock_upstream(
                mock,
                httpx.Response(200, text="<html>blocked</html>"),
                httpx.Response(200, text=sample_thread_json()),
            )
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert route.call_count == 2
        assert response.status_code == 200

    def test_mirror_disabled_uses_original_host(self, app, settings) -> None:
        app.dependency_overrides[get_settings] = lambda: settings.model_copy(
            update={"reddit_mirror_host": ""}
        )
        payload = thread_payload(post={"title": "Direct"}, comments=[])
        with respx.mock() as mock:
            route = mock.get(
                "https://www.reddit.com/r/python/comments/1abcde/which_http_client.json"
            ).mock(return_value=httpx.Response(200, json=payload))
            with TestClient(app) as direct_client:
                response = direct_client.post("/api/scrape", json={"url": THREAD_URL})

        assert route.call_count == 1
        assert response.json()["data"]["post"]["title"] == "Direct"

    def test_deleted_comments_filtered(self, client: TestClient) -> None:
        payload = thread_payload(
            post={"title": "Hello"},
            comments=[
                comment("[deleted]", "[deleted]", 0, replies=[comment("carol", "yo", 1)]),
                comment("dave", "", 3),
            ],
        )
        with respx.mock() as mock:
            _mock_upstream(mock, httpx.Response(200, text=json.dumps(payload)))
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert response.json()["data"]["comments"] == [
            {"author": "carol", "content": "yo", "score": 1, "depth": 1},
        ]

    def test_response_has_request_id(self, client: TestClient) -> None:
        with respx.mock() as mock:
            _mock_upstream(mock, httpx.Response(200, text=sample_thread_json()))
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert response.headers["X-Request-ID"]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestScrapeFailures:
    @pytest.mark.parametrize(
        ("upstream", "message"),
        [
            (httpx.Response(404, text="[]"), "Reddit returned 404: Not Found"),
            (httpx.Response(200, text="   "), "Reddit returned an empty response. Please try again."),
            (
                httpx.Response(200, text="<html><body>whoa there</body></html>"),
                "Reddit blocked the request. Try again in a few seconds.",
            ),
            (
                httpx.Response(200, text="<html>...not found...</html>"),
                "This Reddit post could not be found. It may have been deleted or made private.",
            ),
            (
                httpx.Response(200, text="Page not found"),
                "This Reddit post could not be found. It may have been deleted or made private.",
            ),
            (
                httpx.Response(200, text="Rate limited"),
                "Reddit returned an unexpected response. The post may not be accessible.",
            ),
            (
                httpx.Response(200, text="[{broken"),
                "Failed to parse Reddit response: [{broken...",
            ),
            (
                httpx.Response(200, json={"kind": "Listing"}),
                "Invalid Reddit data structure. Please ensure this is a valid thread URL.",
            ),
            (
                httpx.Response(200, json=[listing([])]),
                "Invalid Reddit data structure. Please ensure this is a valid thread URL.",
            ),
        ],
    )
    def test_upstream_failures(
        self, client: TestClient, upstream: httpx.Response, message: str
    ) -> None:
        with respx.mock() as mock:
            _mock_upstream(mock, upstream)
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert response.status_code == 500
        assert response.json() == {"error": message}
        _assert_cors(response)

    def test_two_html_pages_give_up_after_second(self, client: TestClient) -> None:
        with respx.mock() as mock:
            route = _mock_upstream(
                mock,
                httpx.Response(200, text="<html>one</html>"),
                httpx.Response(200, text="<html>two</html>"),
            )
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert route.call_count == 2
        assert response.status_code == 500
        assert response.json() == {
            "error": "Reddit blocked the request. Try again in a few seconds."
        }

    def test_uncoercible_payload_is_invalid_structure(self, client: TestClient) -> None:
        payload = thread_payload(comments=[comment("bob", "hi", score="many")])  # type: ignore[arg-type]
        with respx.mock() as mock:
            _mock_upstream(mock, httpx.Response(200, text=json.dumps(payload)))
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert response.status_code == 500
        assert response.json()["error"].startswith("Invalid Reddit data structure")

    def test_transport_error(self, client: TestClient) -> None:
        with respx.mock() as mock:
            mock.get(JSON_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to reach Reddit: request timed out"}

    def test_unexpected_exception_is_generic_500(self, client: TestClient) -> None:
        with patch(
            "reddit_thread_scraper.scraper.router.scrape_thread",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert response.status_code == 500
        assert response.json() == {"error": "An error occurred while scraping"}
        _assert_cors(response)

    def test_non_standard_json_constant_is_parse_error(self, client: TestClient) -> None:
        payload = thread_payload(post={"title": "Hello", "created_utc": float("nan")})
        with respx.mock() as mock:
            _mock_upstream(mock, httpx.Response(200, text=json.dumps(payload)))
            response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert response.status_code == 500
        assert response.json()["error"].startswith("Failed to parse Reddit response: ")
        _assert_cors(response)

    def test_response_rendering_failure_is_generic_500(self, client: TestClient) -> None:
        with respx.mock() as mock:
            _mock_upstream(mock, httpx.Response(200, text=sample_thread_json()))
            with patch(
                "reddit_thread_scraper.scraper.router.ScrapeResponse",
                side_effect=ValueError("Out of range float values are not JSON compliant"),
            ):
                response = client.post("/api/scrape", json={"url": THREAD_URL})

        assert response.status_code == 500
        assert response.json() == {"error": "An error occurred while scraping"}
        _assert_cors(response)


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


class TestSystemEndpoints:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_metrics_exposes_scrape_counters(self, client: TestClient) -> None:
        client.options("/api/scrape")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "http_requests_total" in response.text
        assert "thread_scrapes_total" in response.text
