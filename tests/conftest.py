"""Shared test fixtures for the DopeFlix test suite."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from dopeflix.domain.entities.media import (
    EpisodeDescriptor,
    Preferences,
    ServerEntry,
    ShowKind,
    ShowPage,
)
from dopeflix.domain.exceptions import HttpStatusError
from dopeflix.domain.ports.page_fetcher import PageResponse

BASE_URL = "https://dopebox.to"


# ---------------------------------------------------------------------------
# Page fetcher double
# ---------------------------------------------------------------------------


@dataclass
class FakeFetcher:
    """In-memory ``PageFetcherPort``.

    ``pages`` maps a URL to a body string, a ``PageResponse`` or an
    exception instance to raise.  Unknown URLs raise a 404
    ``HttpStatusError``.  Every call is recorded in ``calls``.
    """

    pages: dict[str, Any] = field(default_factory=dict)
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def get(
        self,
        url: str,
        *,
        referer: str,
        headers: Mapping[str, str] | None = None,
    ) -> PageResponse:
        self.calls.append({"url": url, "referer": referer, "headers": dict(headers or {})})
        page = self.pages.get(url)
        if page is None:
            raise HttpStatusError(url, 404)
        if isinstance(page, Exception):
            raise page
        if isinstance(page, PageResponse):
            return page
        return PageResponse(url=url, status_code=200, text=page)

    def referer_for(self, url: str) -> str:
        for call in self.calls:
            if call["url"] == url:
                return call["referer"]
        raise KeyError(url)


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher()


# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def preferences() -> Preferences:
    return Preferences(quality="1080p", sub_language="English")


@pytest.fixture()
def series_page() -> ShowPage:
    return ShowPage(
        url=f"{BASE_URL}/tv/watch-the-office-39383",
        show_id="39383",
        kind=ShowKind.SERIES,
        title="The Office",
    )


@pytest.fixture()
def movie_page() -> ShowPage:
    return ShowPage(
        url=f"{BASE_URL}/movie/watch-heat-19688",
        show_id="19688",
        kind=ShowKind.MOVIE,
        title="Heat",
        html='<div class="detail_page-watch" data-id="19688" data-type="1">'
        '<h2 class="heading-name"><a href="/movie/watch-heat-19688">Heat</a></h2>'
        "</div>",
    )


@pytest.fixture()
def episode() -> EpisodeDescriptor:
    return EpisodeDescriptor(
        name="Season 1 Eps 1: Pilot",
        url=f"{BASE_URL}/ajax/v2/episode/servers/1001",
        episode_number="1",
        ordinal=1,
        referer=f"{BASE_URL}/tv/watch-the-office-39383",
    )


@pytest.fixture()
def vidcloud_server() -> ServerEntry:
    return ServerEntry(name="Vidcloud", server_id="5001")
