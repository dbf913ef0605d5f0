"""Video resolution use case.

Episode -> server list -> concurrent per-server source resolution and
extraction -> aggregation in server order -> preference ranking.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol

import httpx
import structlog

from dopeflix.domain.entities.media import (
    EpisodeDescriptor,
    Preferences,
    ResolvedSource,
    ServerEntry,
    VideoVariant,
)
from dopeflix.domain.exceptions import FetchError
from dopeflix.domain.ports.site import SitePort

# ---------------------------------------------------------------------------
# Protocols: what this use case needs from its collaborators.
# Infrastructure components satisfy these via structural subtyping.
# ---------------------------------------------------------------------------


class _ResolverConfig(Protocol):
    """Configuration values consumed by ResolveVideosUseCase."""

    max_concurrent_servers: int
    resolve_timeout_seconds: float


class _Extractors(Protocol):
    """Dispatches a resolved source to the extractor of its server family."""

    def handles(self, server_name: str) -> bool: ...

    async def extract(
        self, source: ResolvedSource, preferences: Preferences
    ) -> list[VideoVariant] | None: ...


class _Ranker(Protocol):
    """Orders the aggregated variant list by preference."""

    def sort(
        self, variants: Sequence[VideoVariant], preferences: Preferences
    ) -> list[VideoVariant]: ...


log = structlog.get_logger(__name__)


class ResolveVideosUseCase:
    """Resolve one episode into a ranked list of playable variants.

    Flow:
        1. Fetch the episode's server list.
        2. Resolve every supported server concurrently (bounded by a
           semaphore, under a caller-level deadline).
        3. Flatten the per-server results in server-list order.
        4. Rank by preferred quality.

    A failing server contributes nothing; it never fails the episode.
    """

    def __init__(
        self,
        *,
        site: SitePort,
        extractors: _Extractors,
        ranker: _Ranker,
        config: _ResolverConfig,
    ) -> None:
        self._site = site
        self._extractors = extractors
        self._ranker = ranker
        self._max_concurrent = config.max_concurrent_servers
        self._timeout = config.resolve_timeout_seconds

    async def execute(
        self,
        episode: EpisodeDescriptor,
        preferences: Preferences,
    ) -> list[VideoVariant]:
        """Resolve *episode* into variants, best match first.

        Returns:
            Ranked variants. Empty when no server yields anything.

        Raises:
            FetchError: The server list itself could not be fetched.
        """
        servers = await self._site.list_servers(episode)
        if not servers:
            log.info("episode_without_servers", url=episode.url)
            return []

        slots = await self._resolve_servers(servers, episode, preferences)

        variants: list[VideoVariant] = []
        for slot in slots:
            if slot:
                variants.extend(slot)

        ranked = self._ranker.sort(variants, preferences)
        log.info(
            "videos_resolved",
            url=episode.url,
            servers=len(servers),
            servers_with_results=sum(1 for slot in slots if slot),
            variants=len(ranked),
        )
        return ranked

    async def _resolve_servers(
        self,
        servers: list[ServerEntry],
        episode: EpisodeDescriptor,
        preferences: Preferences,
    ) -> list[list[VideoVariant] | None]:
        """Run one task per server; return their results by server index.

        Tasks still running at the deadline are cancelled and leave an
        empty slot.  Cancelling the caller cancels every task.
        """
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _resolve_one(server: ServerEntry) -> list[VideoVariant] | None:
            async with semaphore:
                return await self._resolve_server(server, episode, preferences)

        tasks = [asyncio.create_task(_resolve_one(server)) for server in servers]
        try:
            done, pending = await asyncio.wait(tasks, timeout=self._timeout)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if pending:
            log.warning(
                "server_resolve_deadline",
                url=episode.url,
                timeout=self._timeout,
                pending=len(pending),
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        return [task.result() if task in done else None for task in tasks]

    async def _resolve_server(
        self,
        server: ServerEntry,
        episode: EpisodeDescriptor,
        preferences: Preferences,
    ) -> list[VideoVariant] | None:
        """Resolve and extract one server, catching and logging errors."""
        if not self._extractors.handles(server.name):
            log.debug("server_unsupported", server=server.name)
            return None

        try:
            source = await self._site.resolve_source(server, episode)
            if source is None:
                return None
            return await self._extractors.extract(source, preferences)
        except FetchError as exc:
            log.warning("server_resolve_failed", server=server.name, error=str(exc))
        except httpx.HTTPError as exc:
            log.warning("server_resolve_http_error", server=server.name, error=str(exc))
        except Exception:
            log.exception("server_resolve_error", server=server.name)
        return None
