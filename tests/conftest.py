"""Shared pytest fixtures for the Reddit thread scraper tests.

Fixture summary
---------------
settings     : Settings with the mirror enabled and no retry delay.
app          : FastAPI app built by create_app() with ``settings`` injected.
client       : fastapi.testclient.TestClient against ``app``.

Upstream Reddit traffic is always mocked with respx; no test touches the
network.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# ---------------------------------------------------------------------------
# Test environment bootstrap
# ---------------------------------------------------------------------------
# Set before application modules are imported so the module-level app and
# the cached settings never pick up a developer's .env values.

_TEST_ENV_DEFAULTS: dict[str, str] = {
    "LOG_LEVEL": "INFO",
    "RETRY_DELAY_SECONDS": "0",
    "REDDIT_MIRROR_HOST": "old.reddit.com",
}

for _key, _default in _TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _default)

from reddit_thread_scraper.api.main import create_app  # noqa: E402
from reddit_thread_scraper.config.settings import Settings, get_settings  # noqa: E402

get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings used by the scrape endpoint in tests."""
    return Settings(
        reddit_mirror_host="old.reddit.com",
        retry_delay_seconds=0,
        fetch_timeout_seconds=5,
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    application = create_app()
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
