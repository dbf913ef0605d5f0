"""Episode hierarchy use case: show page -> chronological episode list."""

from __future__ import annotations

from dataclasses import replace

import structlog

from dopeflix.domain.entities.media import EpisodeDescriptor, ShowKind, ShowPage
from dopeflix.domain.ports.site import SitePort

log = structlog.get_logger(__name__)


class ResolveEpisodesUseCase:
    """Walks show -> seasons -> episodes.

    The site lists seasons and episodes newest-first; the collected list
    is reversed before ordinals are assigned, so ``ordinal == 1`` is the
    oldest episode.  Discovery is sequential.  ``StructuralParseError``
    and ``FetchError`` propagate to the caller.
    """

    def __init__(self, site: SitePort) -> None:
        self._site = site

    async def fetch_show_page(self, url: str) -> ShowPage:
        return await self._site.fetch_show_page(url)

    async def execute(self, show_page: ShowPage) -> list[EpisodeDescriptor]:
        if show_page.kind is ShowKind.SERIES:
            collected = await self._collect_series(show_page)
        else:
            collected = [self._site.movie_episode(show_page)]

        collected.reverse()
        episodes = [
            replace(episode, ordinal=index)
            for index, episode in enumerate(collected, start=1)
        ]
        log.info(
            "episodes_resolved",
            url=show_page.url,
            kind=show_page.kind.value,
            count=len(episodes),
        )
        return episodes

    async def _collect_series(self, show_page: ShowPage) -> list[EpisodeDescriptor]:
        seasons = await self._site.list_seasons(show_page)
        if not seasons:
            log.info("series_without_seasons", url=show_page.url)

        collected: list[EpisodeDescriptor] = []
        for season in seasons:
            episodes = await self._site.list_episodes(show_page, season)
            log.debug("season_episodes", season=season.label, count=len(episodes))
            collected.extend(episodes)
        return collected
