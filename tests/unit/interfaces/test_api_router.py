"""Tests for the HTTP API router."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from dopeflix.domain.entities.catalog import CatalogEntry, CatalogPage, SearchFilters, ShowDetails
from dopeflix.domain.entities.media import (
    EpisodeDescriptor,
    Preferences,
    ShowKind,
    ShowPage,
    SubtitleTrack,
    VideoVariant,
)
from dopeflix.domain.exceptions import HttpStatusError, StructuralParseError
from dopeflix.infrastructure.config import AppConfig
from dopeflix.interfaces.api.router import router

_SHOW = ShowPage(
    url="https://dopebox.to/tv/watch-the-office-39383",
    show_id="39383",
    kind=ShowKind.SERIES,
    title="The Office",
)


def _make_app(
    *,
    episodes_uc: MagicMock | None = None,
    videos_uc: MagicMock | None = None,
    catalog_uc: MagicMock | None = None,
) -> FastAPI:
    """Create a minimal FastAPI app with the API router."""
    app = FastAPI()
    app.include_router(router, prefix="/api/v1")
    app.state.config = AppConfig()
    app.state.episodes_uc = episodes_uc
    app.state.videos_uc = videos_uc
    app.state.catalog_uc = catalog_uc
    return app


def _episodes_uc(**kwargs) -> MagicMock:
    uc = MagicMock()
    uc.fetch_show_page = AsyncMock(return_value=_SHOW)
    uc.execute = AsyncMock(**kwargs)
    return uc


class TestEpisodesEndpoint:
    def test_lists_episodes(self) -> None:
        uc = _episodes_uc(
            return_value=[
                EpisodeDescriptor(
                    name="Season 1 Episode 1: Pilot",
                    url="https://dopebox.to/ajax/v2/episode/servers/1001",
                    ordinal=1,
                    referer=_SHOW.url,
                )
            ]
        )
        client = TestClient(_make_app(episodes_uc=uc))

        resp = client.get("/api/v1/shows/episodes", params={"url": "/tv/watch-the-office-39383"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["kind"] == "series"
        assert body["title"] == "The Office"
        assert body["episodes"][0]["ordinal"] == 1
        assert body["episodes"][0]["referer"] == _SHOW.url
        uc.fetch_show_page.assert_awaited_once_with("/tv/watch-the-office-39383")

    def test_structural_failure_is_502(self) -> None:
        uc = _episodes_uc(side_effect=StructuralParseError("div.eps-item[data-id]"))
        client = TestClient(_make_app(episodes_uc=uc))

        resp = client.get("/api/v1/shows/episodes", params={"url": "/tv/x"})

        assert resp.status_code == 502
        assert "div.eps-item" in resp.json()["detail"]

    def test_root_fetch_failure_is_502(self) -> None:
        uc = _episodes_uc()
        uc.fetch_show_page.side_effect = HttpStatusError("https://dopebox.to/tv/x", 404)
        client = TestClient(_make_app(episodes_uc=uc))

        resp = client.get("/api/v1/shows/episodes", params={"url": "/tv/x"})

        assert resp.status_code == 502

    def test_url_required(self) -> None:
        client = TestClient(_make_app(episodes_uc=_episodes_uc()))
        assert client.get("/api/v1/shows/episodes").status_code == 422


class TestVideosEndpoint:
    def test_resolves_with_overridden_preferences(self) -> None:
        variant = VideoVariant(
            url="https://cdn.example/1080/index.m3u8",
            quality="Vidcloud - 1080p",
            subtitles=(SubtitleTrack(url="https://cc.example/en.vtt", language="English"),),
            headers={"Referer": "https://rabbitstream.net/"},
        )
        uc = MagicMock()
        uc.execute = AsyncMock(return_value=[variant])
        client = TestClient(_make_app(videos_uc=uc))

        resp = client.get(
            "/api/v1/episodes/videos",
            params={
                "url": "https://dopebox.to/ajax/v2/episode/servers/1001",
                "referer": _SHOW.url,
                "quality": "720p",
            },
        )

        assert resp.status_code == 200
        assert resp.json() == {
            "videos": [
                {
                    "url": "https://cdn.example/1080/index.m3u8",
                    "quality": "Vidcloud - 1080p",
                    "headers": {"Referer": "https://rabbitstream.net/"},
                    "subtitles": [{"url": "https://cc.example/en.vtt", "language": "English"}],
                }
            ]
        }
        episode, prefs = uc.execute.await_args.args
        assert episode.url == "https://dopebox.to/ajax/v2/episode/servers/1001"
        assert episode.referer == _SHOW.url
        assert prefs == Preferences(quality="720p", sub_language="English")

    def test_no_videos(self) -> None:
        uc = MagicMock()
        uc.execute = AsyncMock(return_value=[])
        client = TestClient(_make_app(videos_uc=uc))

        resp = client.get("/api/v1/episodes/videos", params={"url": "https://dopebox.to/x"})

        assert resp.status_code == 200
        assert resp.json() == {"videos": []}

    def test_server_list_fetch_failure_is_502(self) -> None:
        uc = MagicMock()
        uc.execute = AsyncMock(side_effect=HttpStatusError("https://dopebox.to/x", 500))
        client = TestClient(_make_app(videos_uc=uc))

        resp = client.get("/api/v1/episodes/videos", params={"url": "https://dopebox.to/x"})

        assert resp.status_code == 502


class TestCatalogEndpoints:
    def _uc(self) -> MagicMock:
        page = CatalogPage(
            entries=[CatalogEntry(url="/movie/watch-heat-19688", title="Heat", thumbnail_url="t.jpg")],
            has_next_page=True,
        )
        uc = MagicMock()
        uc.popular = AsyncMock(return_value=page)
        uc.latest = AsyncMock(return_value=page)
        uc.search = AsyncMock(return_value=page)
        uc.details = AsyncMock(
            return_value=ShowDetails(title="Heat", genres=["Crime"], status="completed")
        )
        return uc

    def test_popular(self) -> None:
        uc = self._uc()
        client = TestClient(_make_app(catalog_uc=uc))

        resp = client.get("/api/v1/catalog/popular", params={"page": 2})

        assert resp.status_code == 200
        assert resp.json() == {
            "entries": [
                {"url": "/movie/watch-heat-19688", "title": "Heat", "thumbnail_url": "t.jpg"}
            ],
            "has_next_page": True,
        }
        uc.popular.assert_awaited_once_with(2)

    def test_popular_rejects_page_zero(self) -> None:
        client = TestClient(_make_app(catalog_uc=self._uc()))
        assert client.get("/api/v1/catalog/popular", params={"page": 0}).status_code == 422

    def test_latest(self) -> None:
        client = TestClient(_make_app(catalog_uc=self._uc()))
        assert client.get("/api/v1/catalog/latest").json()["has_next_page"] is True

    def test_search_filters(self) -> None:
        uc = self._uc()
        client = TestClient(_make_app(catalog_uc=uc))

        resp = client.get("/api/v1/catalog/search", params={"type": "movie", "genre": "10"})

        assert resp.status_code == 200
        uc.search.assert_awaited_once_with(
            "", 1, SearchFilters(type="movie", genre="10")
        )

    def test_details(self) -> None:
        client = TestClient(_make_app(catalog_uc=self._uc()))

        resp = client.get("/api/v1/catalog/details", params={"url": "/movie/watch-heat-19688"})

        assert resp.json()["genres"] == ["Crime"]

    def test_catalog_fetch_failure_is_502(self) -> None:
        uc = self._uc()
        uc.latest.side_effect = HttpStatusError("https://dopebox.to/home/", 503)
        client = TestClient(_make_app(catalog_uc=uc))

        assert client.get("/api/v1/catalog/latest").status_code == 502
