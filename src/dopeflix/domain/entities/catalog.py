"""Domain entities for catalog browsing (listings and show details)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ShowStatus = Literal["ongoing", "completed"]


@dataclass(frozen=True)
class CatalogEntry:
    """A show card on a listing page."""

    url: str  # Site-relative path, e.g. "/tv/watch-foo-12345"
    title: str
    thumbnail_url: str = ""


@dataclass(frozen=True)
class CatalogPage:
    entries: list[CatalogEntry] = field(default_factory=list)
    has_next_page: bool = False


@dataclass(frozen=True)
class SearchFilters:
    """Filter form parameters used when searching without a query."""

    type: str = "all"
    quality: str = "all"
    release_year: str = "all"
    genre: str = "all"
    country: str = "all"


@dataclass(frozen=True)
class ShowDetails:
    title: str
    thumbnail_url: str = ""
    description: str = ""
    genres: list[str] = field(default_factory=list)
    production: list[str] = field(default_factory=list)
    status: ShowStatus = "completed"
