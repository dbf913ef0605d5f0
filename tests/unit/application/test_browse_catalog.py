"""Tests for BrowseCatalogUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from dopeflix.application.use_cases import BrowseCatalogUseCase
from dopeflix.domain.entities.catalog import (
    CatalogEntry,
    CatalogPage,
    SearchFilters,
    ShowDetails,
)
from dopeflix.domain.exceptions import HttpStatusError
from dopeflix.infrastructure.config.schema import PreferencesConfig

_PAGE = CatalogPage(
    entries=[CatalogEntry(url="/movie/watch-heat-19688", title="Heat")],
    has_next_page=True,
)


def _site() -> MagicMock:
    site = MagicMock()
    site.popular = AsyncMock(return_value=_PAGE)
    site.latest = AsyncMock(return_value=_PAGE)
    site.search = AsyncMock(return_value=_PAGE)
    site.details = AsyncMock(return_value=ShowDetails(title="Heat"))
    return site


class TestBrowseCatalog:
    @pytest.mark.asyncio()
    async def test_popular_uses_configured_listing(self) -> None:
        site = _site()
        uc = BrowseCatalogUseCase(site, PreferencesConfig(popular_page="tv-show"))

        assert await uc.popular(2) == _PAGE
        site.popular.assert_awaited_once_with(2, "tv-show")

    @pytest.mark.asyncio()
    async def test_latest_uses_configured_section(self) -> None:
        site = _site()
        uc = BrowseCatalogUseCase(site, PreferencesConfig(latest_page="TV Shows"))

        await uc.latest()

        site.latest.assert_awaited_once_with("TV Shows")

    @pytest.mark.asyncio()
    async def test_search_default_filters(self) -> None:
        site = _site()
        uc = BrowseCatalogUseCase(site, PreferencesConfig())

        await uc.search("heat")

        site.search.assert_awaited_once_with("heat", 1, SearchFilters())

    @pytest.mark.asyncio()
    async def test_details(self) -> None:
        uc = BrowseCatalogUseCase(_site(), PreferencesConfig())
        assert (await uc.details("/movie/watch-heat-19688")).title == "Heat"

    @pytest.mark.asyncio()
    async def test_fetch_errors_propagate(self) -> None:
        site = _site()
        site.popular.side_effect = HttpStatusError("https://dopebox.to/movie?page=1", 503)
        uc = BrowseCatalogUseCase(site, PreferencesConfig())

        with pytest.raises(HttpStatusError):
            await uc.popular()
