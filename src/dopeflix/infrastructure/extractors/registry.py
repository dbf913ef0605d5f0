"""Registry that dispatches a resolved source to its family's extractor."""

from __future__ import annotations

import httpx
import structlog

from dopeflix.domain.entities.media import (
    Preferences,
    ResolvedSource,
    ServerFamily,
    VideoVariant,
    classify_server,
)
from dopeflix.domain.exceptions import FetchError
from dopeflix.domain.ports.video_extractor import VideoExtractorPort

log = structlog.get_logger(__name__)


class ExtractorRegistry:
    """Dispatches extraction by server family.

    The family is derived from the server display name (see
    ``classify_server``).  Unknown families and failing extractors
    yield ``None``; errors never leave ``extract()``.
    """

    def __init__(self, extractors: list[VideoExtractorPort] | None = None) -> None:
        self._extractors: dict[ServerFamily, VideoExtractorPort] = {}
        for extractor in extractors or []:
            self.register(extractor)

    def register(self, extractor: VideoExtractorPort) -> None:
        """Register an extractor for its server family (last one wins)."""
        self._extractors[extractor.family] = extractor
        log.debug("extractor_registered", family=extractor.family.value)

    @property
    def supported_families(self) -> list[str]:
        """Return the families with a registered extractor."""
        return [family.value for family in self._extractors]

    def handles(self, server_name: str) -> bool:
        return classify_server(server_name) in self._extractors

    async def extract(
        self,
        source: ResolvedSource,
        preferences: Preferences,
    ) -> list[VideoVariant] | None:
        family = classify_server(source.server_name)
        extractor = self._extractors.get(family)
        if extractor is None:
            log.debug("extractor_not_found", server=source.server_name)
            return None
        return await self._try_extractor(extractor, source, preferences)

    async def _try_extractor(
        self,
        extractor: VideoExtractorPort,
        source: ResolvedSource,
        preferences: Preferences,
    ) -> list[VideoVariant] | None:
        """Run one extractor, logging success/failure."""
        server = source.server_name
        try:
            variants = await extractor.extract(source, preferences)
            if variants:
                log.info("extract_success", server=server, variants=len(variants))
                return variants
            log.info("extract_no_result", server=server, url=source.embed_url)
        except FetchError as exc:
            log.warning("extract_fetch_error", server=server, error=str(exc))
        except httpx.HTTPError as exc:
            log.warning("extract_http_error", server=server, error=str(exc))
        except Exception:
            log.exception("extract_error", server=server, url=source.embed_url)
        return None
