"""Domain entities for episode and video resolution.

Pure value objects, no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlparse

from dopeflix.domain.exceptions import InvalidVariantError


class ShowKind(str, Enum):
    """Kind of show behind a watch page."""

    SERIES = "series"
    MOVIE = "movie"

    @classmethod
    def from_data_type(cls, data_type: str) -> ShowKind:
        """Map the watch page ``data-type`` discriminator ("1"/"2")."""
        if data_type == "2":
            return cls.SERIES
        if data_type == "1":
            return cls.MOVIE
        raise ValueError(f"unknown show data-type: {data_type!r}")


class ServerFamily(str, Enum):
    """Known hosting-server families, decided by server display name."""

    DOODSTREAM = "doodstream"
    VIDCLOUD = "vidcloud"
    UNKNOWN = "unknown"


# Evaluated top to bottom; the first rule with a matching substring wins.
_SERVER_FAMILY_RULES: tuple[tuple[tuple[str, ...], ServerFamily], ...] = (
    (("DoodStream",), ServerFamily.DOODSTREAM),
    (("Vidcloud", "UpCloud"), ServerFamily.VIDCLOUD),
)


def classify_server(display_name: str) -> ServerFamily:
    """Return the server family for *display_name* (case-sensitive)."""
    for markers, family in _SERVER_FAMILY_RULES:
        if any(marker in display_name for marker in markers):
            return family
    return ServerFamily.UNKNOWN


def _is_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


@dataclass(frozen=True)
class ShowPage:
    """Root watch page of a show."""

    url: str
    show_id: str  # Internal numeric id (data-id)
    kind: ShowKind
    title: str = ""
    html: str = field(default="", repr=False)


@dataclass(frozen=True)
class SeasonRef:
    season_id: str
    label: str  # "Season 1"


@dataclass(frozen=True)
class EpisodeDescriptor:
    """One playable unit of a show and where to find its server list."""

    name: str  # "Season 1 Episode 3: Title" / movie heading
    url: str  # Server-list URL
    episode_number: str = "1"
    ordinal: int = 0  # 1-based, chronological
    referer: str = ""  # Page that led to this episode


@dataclass(frozen=True)
class ServerEntry:
    name: str  # "Vidcloud", "UpCloud", "DoodStream", ...
    server_id: str  # Opaque id (data-id)

    @property
    def family(self) -> ServerFamily:
        return classify_server(self.name)


@dataclass(frozen=True)
class ResolvedSource:
    """Embed URL a server id resolved to."""

    embed_url: str
    server_name: str


@dataclass(frozen=True)
class SubtitleTrack:
    url: str
    language: str  # Human-readable label, e.g. "English"


@dataclass(frozen=True)
class VideoVariant:
    """A playable stream plus the subtitle tracks attached to it."""

    url: str
    quality: str  # "<server> - 1080p" / "<server> - Default"
    subtitles: tuple[SubtitleTrack, ...] = ()
    headers: dict[str, str] = field(default_factory=dict)  # Required playback headers

    def __post_init__(self) -> None:
        if not self.url:
            raise InvalidVariantError("video variant URL is empty")
        for track in self.subtitles:
            if not isinstance(track, SubtitleTrack) or not _is_http_url(track.url):
                raise InvalidVariantError(
                    f"invalid subtitle track attached to {self.quality!r}"
                )


@dataclass(frozen=True)
class Preferences:
    """Per-request ranking preferences (substring-matched)."""

    quality: str = "1080p"
    sub_language: str = "English"
