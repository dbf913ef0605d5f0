"""HLS master playlist expansion into one variant per resolution."""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import urljoin

import structlog

from dopeflix.domain.entities.media import SubtitleTrack, VideoVariant
from dopeflix.domain.exceptions import InvalidVariantError
from dopeflix.domain.ports.page_fetcher import PageFetcherPort

log = structlog.get_logger(__name__)

PLAYLIST_MARKER = "playlist.m3u8"
STREAM_INF_PREFIX = "#EXT-X-STREAM-INF:"


def build_variant(
    url: str,
    quality: str,
    subtitles: Sequence[SubtitleTrack],
    headers: dict[str, str] | None = None,
) -> VideoVariant:
    """Build a variant with subtitles, or without them if they are rejected."""
    try:
        return VideoVariant(
            url=url, quality=quality, subtitles=tuple(subtitles), headers=headers or {}
        )
    except InvalidVariantError:
        if not subtitles:
            raise
        log.debug("variant_subtitles_dropped", quality=quality)
        return VideoVariant(url=url, quality=quality, headers=headers or {})


def parse_resolution_height(chunk: str) -> str:
    """Return the height of ``RESOLUTION=WxH`` in a stream-info chunk.

    >>> parse_resolution_height('BANDWIDTH=1,RESOLUTION=1920x1080,CODECS="a"\\nurl')
    '1080'
    """
    after = chunk.split("RESOLUTION=", 1)[-1]
    after = after.split("x", 1)[-1]
    return after.split("\n", 1)[0].split(",", 1)[0].strip()


def parse_master_playlist(
    playlist: str,
    playlist_url: str,
    server_name: str,
) -> list[tuple[str, str]]:
    """Split a master playlist into ``(quality label, variant URL)`` pairs.

    Chunks without a URI line are skipped.  Relative URIs are resolved
    against *playlist_url*.
    """
    pairs: list[tuple[str, str]] = []
    for chunk in playlist.split(STREAM_INF_PREFIX)[1:]:
        lines = chunk.split("\n", 2)
        if len(lines) < 2 or not lines[1].strip():
            continue
        quality = f"{server_name} - {parse_resolution_height(chunk)}p"
        pairs.append((quality, urljoin(playlist_url, lines[1].strip())))
    return pairs


class PlaylistExpander:
    """Turns a primary source file into labeled variants.

    Master playlists (URL containing ``playlist.m3u8``) are fetched and
    expanded per resolution; anything else is a single ``Default``
    variant.
    """

    def __init__(self, fetcher: PageFetcherPort) -> None:
        self._fetcher = fetcher

    async def expand(
        self,
        source_url: str,
        server_name: str,
        subtitles: Sequence[SubtitleTrack],
        *,
        referer: str,
    ) -> list[VideoVariant]:
        if PLAYLIST_MARKER in source_url:
            resp = await self._fetcher.get(source_url, referer=referer)
            pairs = parse_master_playlist(resp.text, resp.url, server_name)
            if pairs:
                log.debug(
                    "playlist_expanded", server=server_name, variants=len(pairs)
                )
                return [build_variant(url, quality, subtitles) for quality, url in pairs]
            log.debug("playlist_without_variants", server=server_name, url=source_url)

        return [build_variant(source_url, f"{server_name} - Default", subtitles)]
