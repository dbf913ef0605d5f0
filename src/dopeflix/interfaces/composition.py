"""Composition root: dependency injection via FastAPI lifespan.

``build_services`` wires the object graph on top of one shared
``httpx.AsyncClient``; the FastAPI lifespan and the CLI both use it.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import cast

import httpx
import structlog
from fastapi import FastAPI

from dopeflix.application.use_cases import (
    BrowseCatalogUseCase,
    ResolveEpisodesUseCase,
    ResolveVideosUseCase,
)
from dopeflix.infrastructure.config import AppConfig
from dopeflix.infrastructure.extractors import (
    DoodStreamExtractor,
    ExtractorRegistry,
    JsonSourceExtractor,
)
from dopeflix.infrastructure.http import HttpxPageFetcher, build_http_client
from dopeflix.infrastructure.ranking import PreferenceRanker
from dopeflix.infrastructure.site import DopeFlixSite
from dopeflix.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@dataclass
class Services:
    site: DopeFlixSite
    extractor_registry: ExtractorRegistry
    episodes_uc: ResolveEpisodesUseCase
    videos_uc: ResolveVideosUseCase
    catalog_uc: BrowseCatalogUseCase


def create_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Shared AsyncClient with 429/503 retry."""
    client = build_http_client(
        timeout=config.http_timeout_seconds,
        user_agent=config.http_user_agent,
        follow_redirects=config.http_follow_redirects,
        max_retries=config.http_retry_max_attempts,
        backoff_base=config.http_retry_backoff_base,
        max_backoff=config.http_retry_max_backoff,
    )
    log.info(
        "http_client_initialized",
        timeout=config.http_timeout_seconds,
        retry_max_attempts=config.http_retry_max_attempts,
    )
    return client


def build_services(config: AppConfig, http_client: httpx.AsyncClient) -> Services:
    """Wire site adapter, extractors, ranker and use cases."""
    fetcher = HttpxPageFetcher(http_client)
    site = DopeFlixSite(fetcher, config.base_url)

    registry = ExtractorRegistry(
        [
            DoodStreamExtractor(fetcher),
            JsonSourceExtractor(fetcher),
        ]
    )
    log.info(
        "extractors_initialized",
        families=registry.supported_families,
        base_url=site.base_url,
    )

    return Services(
        site=site,
        extractor_registry=registry,
        episodes_uc=ResolveEpisodesUseCase(site),
        videos_uc=ResolveVideosUseCase(
            site=site,
            extractors=registry,
            ranker=PreferenceRanker(),
            config=config.resolver,
        ),
        catalog_uc=BrowseCatalogUseCase(site, config.preferences),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: initialize and clean up all resources.

    Order matters:
        1. HTTP client (required by the page fetcher)
        2. Site adapter + extractor registry
        3. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    state.http_client = create_http_client(config)

    services = build_services(config, state.http_client)
    state.site = services.site
    state.extractor_registry = services.extractor_registry
    state.episodes_uc = services.episodes_uc
    state.videos_uc = services.videos_uc
    state.catalog_uc = services.catalog_uc

    log.info("app_startup_complete", domain=config.source.domain)

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
