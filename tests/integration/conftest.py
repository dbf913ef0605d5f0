"""Shared fixtures for integration tests.

These tests use the real composition (httpx client, page fetcher, site
adapter, extractors, ranker, use cases) with HTTP mocked via respx.
"""

from __future__ import annotations

import pytest
import respx

from dopeflix.infrastructure.config import AppConfig


@pytest.fixture()
def config() -> AppConfig:
    return AppConfig.model_validate(
        {
            "http": {"retry_max_attempts": 0},
            "resolver": {"resolve_timeout_seconds": 5.0},
        }
    )


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
