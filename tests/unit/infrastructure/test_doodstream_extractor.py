"""Tests for DoodStreamExtractor."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from dopeflix.domain.entities.media import Preferences, ResolvedSource, ServerFamily
from dopeflix.domain.exceptions import FetchConnectionError, HttpStatusError
from dopeflix.domain.ports.page_fetcher import PageResponse
from dopeflix.infrastructure.extractors.doodstream import DoodStreamExtractor

_EMBED = "https://dood.re/e/xyz123"


def _make_embed_html(
    *,
    pass_md5: str = "/pass_md5/abc123/def456",
    token: str = "a1b2c3d4e5",
    captcha: bool = False,
    offline: bool = False,
) -> str:
    """Build a minimal DoodStream embed page."""
    parts = ["<html><head><title>DoodStream</title></head><body>"]
    if offline:
        parts.append("<h1> Oops! Sorry </h1>")
    if captcha:
        parts.append('<div data-sitekey="6Lc..."></div>')
    parts.append(
        f"<script>$.get('{pass_md5}', function(data)"
        "{ "
        f"var token = '&token={token}';"
        " });</script>"
    )
    parts.append("minimalUserResponseInMiliseconds")
    parts.append("</body></html>")
    return "\n".join(parts)


def _page(text: str, url: str = _EMBED) -> PageResponse:
    return PageResponse(url=url, status_code=200, text=text)


def _source(url: str = _EMBED) -> ResolvedSource:
    return ResolvedSource(embed_url=url, server_name="DoodStream")


def _extractor(*responses: object) -> tuple[DoodStreamExtractor, AsyncMock]:
    fetcher = AsyncMock()
    fetcher.get = AsyncMock(side_effect=list(responses))
    return DoodStreamExtractor(fetcher), fetcher


class TestDoodStreamExtractor:
    def test_family(self) -> None:
        extractor, _ = _extractor()
        assert extractor.family is ServerFamily.DOODSTREAM

    @pytest.mark.asyncio()
    async def test_successful_extraction(self) -> None:
        extractor, fetcher = _extractor(
            _page(_make_embed_html()),
            _page("https://cv.dood.re/dl/abc123_video.mp4", "https://dood.re/pass_md5/abc123/def456"),
        )

        variants = await extractor.extract(_source(), Preferences())

        assert variants is not None and len(variants) == 1
        variant = variants[0]
        assert variant.url.startswith("https://cv.dood.re/dl/abc123_video.mp4?")
        assert "token=a1b2c3d4e5" in variant.url
        assert "expiry=" in variant.url
        assert variant.quality == "DoodStream - Default"
        assert variant.subtitles == ()
        assert variant.headers == {"Referer": _EMBED}

        pass_call = fetcher.get.call_args_list[1]
        assert pass_call.args[0] == "https://dood.re/pass_md5/abc123/def456"
        assert pass_call.kwargs["referer"] == _EMBED

    @pytest.mark.asyncio()
    async def test_pass_md5_uses_redirected_host(self) -> None:
        extractor, fetcher = _extractor(
            _page(_make_embed_html(), "https://d000d.com/e/xyz123"),
            _page("https://cv.dood.re/dl/video.mp4"),
        )

        variants = await extractor.extract(_source(), Preferences())

        assert variants is not None
        assert fetcher.get.call_args_list[1].args[0].startswith("https://d000d.com/pass_md5/")
        assert variants[0].headers == {"Referer": "https://d000d.com/e/xyz123"}

    @pytest.mark.asyncio()
    async def test_converts_d_url_to_embed(self) -> None:
        extractor, fetcher = _extractor(
            _page(_make_embed_html()),
            _page("https://cv.dood.re/dl/video.mp4"),
        )

        await extractor.extract(_source("https://dood.re/d/xyz123"), Preferences())

        assert fetcher.get.call_args_list[0].args[0] == "https://dood.re/e/xyz123"

    @pytest.mark.asyncio()
    async def test_none_on_http_error(self) -> None:
        extractor, _ = _extractor(HttpStatusError(_EMBED, 404))
        assert await extractor.extract(_source(), Preferences()) is None

    @pytest.mark.asyncio()
    async def test_none_on_connection_error(self) -> None:
        extractor, _ = _extractor(FetchConnectionError(_EMBED, "timeout"))
        assert await extractor.extract(_source(), Preferences()) is None

    @pytest.mark.asyncio()
    async def test_none_when_offline(self) -> None:
        extractor, _ = _extractor(_page(_make_embed_html(offline=True)))
        assert await extractor.extract(_source(), Preferences()) is None

    @pytest.mark.asyncio()
    async def test_none_when_video_not_found(self) -> None:
        extractor, _ = _extractor(
            _page("<html><title> Video not found | DoodStream</title></html>")
        )
        assert await extractor.extract(_source(), Preferences()) is None

    @pytest.mark.asyncio()
    async def test_none_when_captcha_required(self) -> None:
        extractor, _ = _extractor(_page(_make_embed_html(captcha=True)))
        assert await extractor.extract(_source(), Preferences()) is None

    @pytest.mark.asyncio()
    async def test_none_when_no_token(self) -> None:
        extractor, _ = _extractor(
            _page("<script>$.get('/pass_md5/abc/def', function(d){});</script>")
        )
        assert await extractor.extract(_source(), Preferences()) is None

    @pytest.mark.asyncio()
    async def test_none_when_pass_md5_fails(self) -> None:
        extractor, _ = _extractor(
            _page(_make_embed_html()),
            HttpStatusError("https://dood.re/pass_md5/abc123/def456", 403),
        )
        assert await extractor.extract(_source(), Preferences()) is None

    @pytest.mark.asyncio()
    async def test_none_when_invalid_video_base(self) -> None:
        extractor, _ = _extractor(_page(_make_embed_html()), _page("<html>error</html>"))
        assert await extractor.extract(_source(), Preferences()) is None
