"""Domain exceptions."""

from __future__ import annotations


class DopeFlixError(Exception):
    """Base class for all dopeflix errors."""


class FetchError(DopeFlixError):
    """Base class for page fetch failures."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url


class HttpStatusError(FetchError):
    """Raised when the server answered with a 4xx/5xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(url, f"HTTP {status_code}")
        self.status_code = status_code


class FetchConnectionError(FetchError):
    """Raised when no response was received (DNS, TLS, timeout, reset)."""


class StructuralParseError(DopeFlixError):
    """Raised when required markup is missing from a page."""

    def __init__(self, what: str, url: str = "") -> None:
        message = f"missing required markup: {what}"
        if url:
            message = f"{message} ({url})"
        super().__init__(message)
        self.what = what
        self.url = url


class InvalidVariantError(DopeFlixError, ValueError):
    """Raised when a video variant cannot be built from its parts."""


class ConfigError(DopeFlixError):
    """Raised when configuration cannot be loaded."""
