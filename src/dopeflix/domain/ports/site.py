"""Port for the streaming site itself (pages, ajax fragments, listings)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dopeflix.domain.entities.catalog import CatalogPage, SearchFilters, ShowDetails
from dopeflix.domain.entities.media import (
    EpisodeDescriptor,
    ResolvedSource,
    SeasonRef,
    ServerEntry,
    ShowPage,
)


@runtime_checkable
class SitePort(Protocol):
    """Fetches and parses the site's pages.

    Hierarchy methods raise ``StructuralParseError`` when required markup
    is missing and ``FetchError`` subclasses when a page cannot be
    fetched.  Lists are returned in page order.
    """

    @property
    def base_url(self) -> str: ...

    async def fetch_show_page(self, url: str) -> ShowPage: ...

    async def list_seasons(self, show: ShowPage) -> list[SeasonRef]: ...

    async def list_episodes(
        self, show: ShowPage, season: SeasonRef
    ) -> list[EpisodeDescriptor]: ...

    def movie_episode(self, show: ShowPage) -> EpisodeDescriptor: ...

    async def list_servers(self, episode: EpisodeDescriptor) -> list[ServerEntry]: ...

    async def resolve_source(
        self, server: ServerEntry, episode: EpisodeDescriptor
    ) -> ResolvedSource | None: ...

    async def popular(self, page: int, listing: str) -> CatalogPage: ...

    async def latest(self, section: str) -> CatalogPage: ...

    async def search(
        self, query: str, page: int, filters: SearchFilters
    ) -> CatalogPage: ...

    async def details(self, url: str) -> ShowDetails: ...
