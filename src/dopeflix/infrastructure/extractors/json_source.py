"""Vidcloud / UpCloud extractor for the JSON sources payload behind an embed page.

Extraction: embed URL ``https://<host>/embed-4/<id>?z=`` →
GET ``https://<host>/ajax/embed-4/getSources?id=<id>`` →
``{"sources":[{"file":"..."}],"tracks":[...]}`` → master playlist or
direct file + caption tracks.

Encrypted payloads (``"sources":"<ciphertext>"``) and other shapes are
treated as "not this family" and yield no result.
"""

from __future__ import annotations

import re
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError

from dopeflix.domain.entities.media import (
    Preferences,
    ResolvedSource,
    ServerFamily,
    SubtitleTrack,
    VideoVariant,
)
from dopeflix.domain.ports.page_fetcher import PageFetcherPort
from dopeflix.infrastructure.ranking.preference_ranker import rank_subtitles

from .playlist import PlaylistExpander

log = structlog.get_logger(__name__)

SOURCES_MARKER = '{"sources":[{"file":"'

_EMBED_RE = re.compile(
    r"^(?P<origin>https?://[^/]+)/embed-(?P<version>\d+)/(?:[a-z]-\d+/)?(?P<id>[^/?#]+)"
)


class _SourceFile(BaseModel):
    file: str = Field(min_length=1)


class _TrackEntry(BaseModel):
    file: str
    label: str = ""
    kind: str = ""


class SourcesPayload(BaseModel):
    """Known shape of a getSources answer."""

    sources: list[_SourceFile] = Field(min_length=1)
    tracks: list[Any] | None = None


def sources_api_url(embed_url: str) -> str | None:
    """Map an embed page URL to its getSources endpoint.

    >>> sources_api_url("https://rabbitstream.net/embed-4/AbC123?z=")
    'https://rabbitstream.net/ajax/embed-4/getSources?id=AbC123'
    """
    m = _EMBED_RE.match(embed_url)
    if not m:
        return None
    return f"{m['origin']}/ajax/embed-{m['version']}/getSources?id={m['id']}"


def parse_caption_tracks(raw_tracks: list[Any] | None) -> list[SubtitleTrack]:
    """Convert ``kind == "captions"`` entries, dropping malformed ones."""
    tracks: list[SubtitleTrack] = []
    for raw in raw_tracks or []:
        try:
            entry = _TrackEntry.model_validate(raw)
        except ValidationError:
            log.debug("caption_track_malformed", entry=str(raw)[:80])
            continue
        if entry.kind != "captions":
            continue
        tracks.append(SubtitleTrack(url=entry.file, language=entry.label))
    return tracks


def decode_sources(payload: str) -> SourcesPayload | None:
    """Decode a getSources body, or ``None`` when it is another shape."""
    if SOURCES_MARKER not in payload:
        return None
    try:
        return SourcesPayload.model_validate_json(payload)
    except ValidationError:
        return None


class JsonSourceExtractor:
    """Resolves Vidcloud/UpCloud embeds into ranked-subtitle variants."""

    def __init__(
        self,
        fetcher: PageFetcherPort,
        expander: PlaylistExpander | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._expander = expander or PlaylistExpander(fetcher)

    @property
    def family(self) -> ServerFamily:
        return ServerFamily.VIDCLOUD

    async def get_sources_json(self, embed_url: str) -> str | None:
        """Fetch the raw getSources body for *embed_url*."""
        api_url = sources_api_url(embed_url)
        if api_url is None:
            log.warning("json_source_unrecognized_embed", url=embed_url)
            return None
        resp = await self._fetcher.get(
            api_url,
            referer=embed_url,
            headers={"X-Requested-With": "XMLHttpRequest"},
        )
        return resp.text

    async def extract(
        self,
        source: ResolvedSource,
        preferences: Preferences,
    ) -> list[VideoVariant] | None:
        body = await self.get_sources_json(source.embed_url)
        if body is None:
            return None

        payload = decode_sources(body)
        if payload is None:
            log.info(
                "json_source_unknown_shape",
                server=source.server_name,
                url=source.embed_url,
            )
            return None

        master_url = payload.sources[0].file
        subtitles = rank_subtitles(parse_caption_tracks(payload.tracks), preferences)
        return await self._expander.expand(
            master_url,
            source.server_name,
            subtitles,
            referer=source.embed_url,
        )
