"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from dopeflix.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from dopeflix.application.use_cases import (
        BrowseCatalogUseCase,
        ResolveEpisodesUseCase,
        ResolveVideosUseCase,
    )
    from dopeflix.infrastructure.extractors import ExtractorRegistry
    from dopeflix.infrastructure.site import DopeFlixSite


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    site: DopeFlixSite
    extractor_registry: ExtractorRegistry

    # Use Cases
    episodes_uc: ResolveEpisodesUseCase
    videos_uc: ResolveVideosUseCase
    catalog_uc: BrowseCatalogUseCase
