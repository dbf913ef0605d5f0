"""Site adapter: builds the site's URLs, fetches them and hands the markup
to the parsers.

Satisfies ``SitePort``.  Every request carries a ``Referer`` derived from
the page that led to it (the show page for hierarchy fetches, the
episode's referer for server and source fetches, the site root for
listings).
"""

from __future__ import annotations

from urllib.parse import urlencode, urljoin

import structlog

from dopeflix.domain.entities.catalog import CatalogPage, SearchFilters, ShowDetails
from dopeflix.domain.entities.media import (
    EpisodeDescriptor,
    ResolvedSource,
    SeasonRef,
    ServerEntry,
    ShowPage,
)
from dopeflix.domain.ports.page_fetcher import PageFetcherPort

from . import parsers

log = structlog.get_logger(__name__)


class DopeFlixSite:
    """DopeBox/SFlix-style site on one mirror domain."""

    def __init__(self, fetcher: PageFetcherPort, base_url: str) -> None:
        self._fetcher = fetcher
        self._base_url = base_url.rstrip("/")

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def _root_referer(self) -> str:
        return f"{self._base_url}/"

    def absolute_url(self, url: str) -> str:
        """Resolve site-relative paths (``/tv/watch-foo-123``) on this mirror."""
        return urljoin(self._root_referer, url)

    # ------------------------------------------------------------------
    # Episode hierarchy
    # ------------------------------------------------------------------

    async def fetch_show_page(self, url: str) -> ShowPage:
        page_url = self.absolute_url(url)
        resp = await self._fetcher.get(page_url, referer=self._root_referer)
        show = parsers.parse_show_page(resp.text, resp.url)
        log.debug("show_page_parsed", url=resp.url, show_id=show.show_id, kind=show.kind.value)
        return show

    async def list_seasons(self, show: ShowPage) -> list[SeasonRef]:
        url = f"{self._base_url}/ajax/v2/tv/seasons/{show.show_id}"
        resp = await self._fetcher.get(url, referer=show.url)
        return parsers.parse_seasons(resp.text, url)

    async def list_episodes(
        self, show: ShowPage, season: SeasonRef
    ) -> list[EpisodeDescriptor]:
        url = f"{self._base_url}/ajax/v2/season/episodes/{season.season_id}"
        resp = await self._fetcher.get(url, referer=show.url)
        return parsers.parse_episodes(
            resp.text,
            season,
            base_url=self._base_url,
            referer=show.url,
            url=url,
        )

    def movie_episode(self, show: ShowPage) -> EpisodeDescriptor:
        return parsers.movie_episode(show, base_url=self._base_url)

    # ------------------------------------------------------------------
    # Servers and sources
    # ------------------------------------------------------------------

    def _episode_referer(self, episode: EpisodeDescriptor) -> str:
        return episode.referer or self._root_referer

    async def list_servers(self, episode: EpisodeDescriptor) -> list[ServerEntry]:
        url = self.absolute_url(episode.url)
        resp = await self._fetcher.get(url, referer=self._episode_referer(episode))
        return parsers.parse_servers(resp.text, url)

    async def resolve_source(
        self, server: ServerEntry, episode: EpisodeDescriptor
    ) -> ResolvedSource | None:
        url = f"{self._base_url}/ajax/sources/{server.server_id}"
        resp = await self._fetcher.get(url, referer=self._episode_referer(episode))
        link = parsers.decode_source_link(resp.text)
        if link is None:
            log.info("source_link_unknown_shape", server=server.name, url=url)
            return None
        return ResolvedSource(embed_url=link, server_name=server.name)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def popular(self, page: int, listing: str) -> CatalogPage:
        url = f"{self._base_url}/{listing}?page={page}"
        resp = await self._fetcher.get(url, referer=self._root_referer)
        return parsers.parse_listing(resp.text)

    async def latest(self, section: str) -> CatalogPage:
        resp = await self._fetcher.get(
            f"{self._base_url}/home/", referer=self._root_referer
        )
        return parsers.parse_latest(resp.text, section)

    def search_url(self, query: str, page: int, filters: SearchFilters) -> str:
        if query.strip():
            slug = query.strip().replace(" ", "-")
            return f"{self._base_url}/search/{slug}?page={page}"
        params = {
            "page": page,
            "type": filters.type,
            "quality": filters.quality,
            "release_year": filters.release_year,
            "genre": filters.genre,
            "country": filters.country,
        }
        return f"{self._base_url}/filter?{urlencode(params)}"

    async def search(
        self, query: str, page: int, filters: SearchFilters
    ) -> CatalogPage:
        resp = await self._fetcher.get(
            self.search_url(query, page, filters), referer=self._root_referer
        )
        return parsers.parse_listing(resp.text)

    async def details(self, url: str) -> ShowDetails:
        page_url = self.absolute_url(url)
        resp = await self._fetcher.get(page_url, referer=self._root_referer)
        return parsers.parse_details(resp.text, page_url)
