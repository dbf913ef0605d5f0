"""Tests for the domain exception hierarchy."""

from __future__ import annotations

from dopeflix.domain.exceptions import (
    ConfigError,
    DopeFlixError,
    FetchConnectionError,
    FetchError,
    HttpStatusError,
    StructuralParseError,
)


def test_http_status_error_carries_status() -> None:
    exc = HttpStatusError("https://dopebox.to/x", 503)
    assert exc.status_code == 503
    assert exc.url == "https://dopebox.to/x"
    assert "HTTP 503" in str(exc)
    assert isinstance(exc, FetchError)


def test_connection_error_is_fetch_error() -> None:
    exc = FetchConnectionError("https://dopebox.to/x", "timeout")
    assert isinstance(exc, FetchError)
    assert str(exc) == "timeout (https://dopebox.to/x)"


def test_structural_parse_error_message() -> None:
    exc = StructuralParseError("div.detail_page-watch", "https://dopebox.to/tv/x")
    assert exc.what == "div.detail_page-watch"
    assert "div.detail_page-watch" in str(exc)
    assert "https://dopebox.to/tv/x" in str(exc)


def test_everything_roots_at_dopeflix_error() -> None:
    for cls in (FetchError, StructuralParseError, ConfigError):
        assert issubclass(cls, DopeFlixError)
