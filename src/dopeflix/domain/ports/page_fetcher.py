"""Port for fetching pages from the streaming site."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class PageResponse:
    """Body and metadata of a fetched page."""

    url: str  # Final URL after redirects
    status_code: int
    text: str
    headers: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class PageFetcherPort(Protocol):
    """Issues GET requests that always carry a ``Referer`` header.

    Implementations raise ``HttpStatusError`` for 4xx/5xx answers and
    ``FetchConnectionError`` when no response was received.
    """

    async def get(
        self,
        url: str,
        *,
        referer: str,
        headers: Mapping[str, str] | None = None,
    ) -> PageResponse: ...
