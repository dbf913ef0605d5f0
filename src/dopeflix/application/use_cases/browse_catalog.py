"""Catalog use case: popular/latest listings, search and show details."""

from __future__ import annotations

from typing import Protocol

import structlog

from dopeflix.domain.entities.catalog import CatalogPage, SearchFilters, ShowDetails
from dopeflix.domain.ports.site import SitePort

log = structlog.get_logger(__name__)


class _CatalogConfig(Protocol):
    """Configuration values consumed by BrowseCatalogUseCase."""

    popular_page: str
    latest_page: str


class BrowseCatalogUseCase:
    """Catalog browsing on the configured mirror.

    The listing path for *popular* and the home page section for
    *latest* come from the preferences.  Fetch and structural errors
    propagate.
    """

    def __init__(self, site: SitePort, config: _CatalogConfig) -> None:
        self._site = site
        self._popular_page = config.popular_page
        self._latest_page = config.latest_page

    async def popular(self, page: int = 1) -> CatalogPage:
        result = await self._site.popular(page, self._popular_page)
        log.debug("catalog_popular", page=page, entries=len(result.entries))
        return result

    async def latest(self) -> CatalogPage:
        result = await self._site.latest(self._latest_page)
        log.debug("catalog_latest", section=self._latest_page, entries=len(result.entries))
        return result

    async def search(
        self,
        query: str,
        page: int = 1,
        filters: SearchFilters | None = None,
    ) -> CatalogPage:
        """Search by title, or browse the filter page when *query* is blank."""
        result = await self._site.search(query, page, filters or SearchFilters())
        log.debug("catalog_search", query=query, page=page, entries=len(result.entries))
        return result

    async def details(self, url: str) -> ShowDetails:
        return await self._site.details(url)
