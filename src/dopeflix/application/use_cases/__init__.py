from .browse_catalog import BrowseCatalogUseCase
from .resolve_episodes import ResolveEpisodesUseCase
from .resolve_videos import ResolveVideosUseCase

__all__ = ["BrowseCatalogUseCase", "ResolveEpisodesUseCase", "ResolveVideosUseCase"]
