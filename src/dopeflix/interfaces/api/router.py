"""HTTP API endpoints: episode listing, video resolution and catalog."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from dopeflix.domain.entities.catalog import CatalogPage, SearchFilters
from dopeflix.domain.entities.media import EpisodeDescriptor, VideoVariant
from dopeflix.domain.exceptions import FetchError, StructuralParseError
from dopeflix.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["dopeflix"])


def _bad_gateway(event: str, exc: Exception, **context: Any) -> JSONResponse:
    """Upstream page missing or unreadable -> 502 with the reason."""
    log.warning(event, error=str(exc), **context)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


def _format_variant(variant: VideoVariant) -> dict[str, Any]:
    return {
        "url": variant.url,
        "quality": variant.quality,
        "headers": dict(variant.headers),
        "subtitles": [
            {"url": track.url, "language": track.language}
            for track in variant.subtitles
        ],
    }


def _format_catalog_page(page: CatalogPage) -> dict[str, Any]:
    return {
        "entries": [asdict(entry) for entry in page.entries],
        "has_next_page": page.has_next_page,
    }


@router.get("/shows/episodes")
async def show_episodes(
    request: Request,
    url: str = Query(..., min_length=1, description="Show watch page path or URL"),
) -> JSONResponse:
    """List a show's episodes in chronological order."""
    state = cast(AppState, request.app.state)
    uc = state.episodes_uc

    try:
        show_page = await uc.fetch_show_page(url)
        episodes = await uc.execute(show_page)
    except (StructuralParseError, FetchError) as exc:
        return _bad_gateway("episodes_request_failed", exc, url=url)

    return JSONResponse(
        content={
            "title": show_page.title,
            "kind": show_page.kind.value,
            "episodes": [asdict(episode) for episode in episodes],
        }
    )


@router.get("/episodes/videos")
async def episode_videos(
    request: Request,
    url: str = Query(..., min_length=1, description="Episode server-list URL"),
    referer: str = Query("", description="Page that led to the episode"),
    quality: str | None = Query(None, description="Preferred quality override"),
    sub_language: str | None = Query(None, description="Preferred subtitle language override"),
) -> JSONResponse:
    """Resolve an episode into ranked playable variants."""
    state = cast(AppState, request.app.state)
    preferences = state.config.preferences.to_preferences(
        quality=quality, sub_language=sub_language
    )
    episode = EpisodeDescriptor(name="", url=url, referer=referer)

    try:
        variants = await state.videos_uc.execute(episode, preferences)
    except (StructuralParseError, FetchError) as exc:
        return _bad_gateway("videos_request_failed", exc, url=url)

    return JSONResponse(content={"videos": [_format_variant(v) for v in variants]})


@router.get("/catalog/popular")
async def catalog_popular(
    request: Request,
    page: int = Query(1, ge=1),
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        result = await state.catalog_uc.popular(page)
    except (StructuralParseError, FetchError) as exc:
        return _bad_gateway("catalog_popular_failed", exc, page=page)
    return JSONResponse(content=_format_catalog_page(result))


@router.get("/catalog/latest")
async def catalog_latest(request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        result = await state.catalog_uc.latest()
    except (StructuralParseError, FetchError) as exc:
        return _bad_gateway("catalog_latest_failed", exc)
    return JSONResponse(content=_format_catalog_page(result))


@router.get("/catalog/search")
async def catalog_search(
    request: Request,
    q: str = Query("", description="Title query; blank browses the filter page"),
    page: int = Query(1, ge=1),
    type: str = Query("all"),
    quality: str = Query("all"),
    release_year: str = Query("all"),
    genre: str = Query("all"),
    country: str = Query("all"),
) -> JSONResponse:
    """Search by title, or filter the full catalog when ``q`` is blank."""
    state = cast(AppState, request.app.state)
    filters = SearchFilters(
        type=type,
        quality=quality,
        release_year=release_year,
        genre=genre,
        country=country,
    )
    try:
        result = await state.catalog_uc.search(q, page, filters)
    except (StructuralParseError, FetchError) as exc:
        return _bad_gateway("catalog_search_failed", exc, query=q, page=page)
    return JSONResponse(content=_format_catalog_page(result))


@router.get("/catalog/details")
async def catalog_details(
    request: Request,
    url: str = Query(..., min_length=1),
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    try:
        details = await state.catalog_uc.details(url)
    except (StructuralParseError, FetchError) as exc:
        return _bad_gateway("catalog_details_failed", exc, url=url)
    return JSONResponse(content=asdict(details))
