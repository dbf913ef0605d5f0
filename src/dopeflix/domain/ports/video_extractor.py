"""Port for turning a hosting-server embed URL into video variants."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from dopeflix.domain.entities.media import (
    Preferences,
    ResolvedSource,
    ServerFamily,
    VideoVariant,
)


@runtime_checkable
class VideoExtractorPort(Protocol):
    """Extracts playable variants for one server family.

    Implementations handle host-specific logic (token endpoints, JSON
    source payloads, master playlists).  Returning ``None`` means "this
    source is not in a shape I understand" and is not an error.
    """

    @property
    def family(self) -> ServerFamily:
        """Server family this extractor handles."""
        ...

    async def extract(
        self,
        source: ResolvedSource,
        preferences: Preferences,
    ) -> list[VideoVariant] | None: ...
