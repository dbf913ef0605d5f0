from .catalog import (
    CatalogEntry,
    CatalogPage,
    SearchFilters,
    ShowDetails,
    ShowStatus,
)
from .media import (
    EpisodeDescriptor,
    Preferences,
    ResolvedSource,
    SeasonRef,
    ServerEntry,
    ServerFamily,
    ShowKind,
    ShowPage,
    SubtitleTrack,
    VideoVariant,
    classify_server,
)

__all__ = [
    "CatalogEntry",
    "CatalogPage",
    "EpisodeDescriptor",
    "Preferences",
    "ResolvedSource",
    "SearchFilters",
    "SeasonRef",
    "ServerEntry",
    "ServerFamily",
    "ShowDetails",
    "ShowKind",
    "ShowPage",
    "ShowStatus",
    "SubtitleTrack",
    "VideoVariant",
    "classify_server",
]
