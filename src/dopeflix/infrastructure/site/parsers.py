"""Pure parsers for the site's watch pages, ajax fragments and listings.

No I/O here: every function takes markup (plus the URL it came from, for
error messages) and returns domain entities.
"""

from __future__ import annotations

import structlog
from bs4 import Tag
from pydantic import BaseModel, Field, ValidationError

from dopeflix.domain.entities.catalog import CatalogEntry, CatalogPage, ShowDetails
from dopeflix.domain.entities.media import (
    EpisodeDescriptor,
    SeasonRef,
    ServerEntry,
    ShowKind,
    ShowPage,
)
from dopeflix.domain.exceptions import StructuralParseError
from dopeflix.infrastructure.common.html_selectors import (
    extract_attr,
    extract_text,
    parse_html,
    require_attr,
    require_one,
    require_text,
    select_items,
)

WATCH_CONTAINER = "div.detail_page-watch"
HEADING = "h2.heading-name"
SEASON_ITEM = "a.dropdown-item.ss-item"
EPISODE_ITEM = "div.eps-item"
SERVER_ITEMS = ("ul.fss-list a.btn-play", "a.link-item")
LISTING_ITEM = "div.film_list-wrap div.flw-item div.film-poster"
NEXT_PAGE = "ul.pagination li.page-item a[title=next]"

log = structlog.get_logger(__name__)


def parse_show_page(html: str, url: str) -> ShowPage:
    """Read the internal id and series/movie discriminator of a watch page."""
    doc = parse_html(html)
    container = require_one(doc, WATCH_CONTAINER, url=url)
    show_id = require_attr(container, "data-id", url=url)
    data_type = require_attr(container, "data-type", url=url)
    try:
        kind = ShowKind.from_data_type(data_type)
    except ValueError as exc:
        raise StructuralParseError(f"{WATCH_CONTAINER}[data-type={data_type}]", url) from exc
    return ShowPage(
        url=url,
        show_id=show_id,
        kind=kind,
        title=extract_text(doc, HEADING),
        html=html,
    )


def parse_seasons(html: str, url: str) -> list[SeasonRef]:
    """Seasons listing fragment → season refs (page order)."""
    doc = parse_html(html)
    return [
        SeasonRef(
            season_id=require_attr(item, "data-id", url=url),
            label=extract_text(item, ""),
        )
        for item in doc.select(SEASON_ITEM)
    ]


def parse_episodes(
    html: str,
    season: SeasonRef,
    *,
    base_url: str,
    referer: str,
    url: str,
) -> list[EpisodeDescriptor]:
    """Season episode listing fragment → descriptors (page order)."""
    doc = parse_html(html)
    episodes: list[EpisodeDescriptor] = []
    for item in doc.select(EPISODE_ITEM):
        episode_id = require_attr(item, "data-id", url=url)
        number = require_text(item, "div.episode-number", url=url)
        title = require_text(item, "h3.film-name a", url=url)
        episodes.append(
            EpisodeDescriptor(
                name=f"{season.label} {number} {title}",
                url=f"{base_url}/ajax/v2/episode/servers/{episode_id}",
                episode_number=_digits(number) or number,
                referer=referer,
            )
        )
    return episodes


def movie_episode(show: ShowPage, *, base_url: str) -> EpisodeDescriptor:
    """The single descriptor of a movie, built from its watch page."""
    name = require_text(parse_html(show.html), HEADING, url=show.url)
    return EpisodeDescriptor(
        name=name,
        url=f"{base_url}/ajax/movie/episodes/{show.show_id}",
        episode_number="1",
        referer=show.url,
    )


def parse_servers(html: str, url: str) -> list[ServerEntry]:
    """Server list fragment → entries.  An empty list is valid."""
    doc = parse_html(html)
    servers: list[ServerEntry] = []
    for anchor in select_items(doc, *SERVER_ITEMS):
        name = extract_text(anchor, "span") or extract_attr(anchor, "", "title")
        server_id = extract_attr(anchor, "", "data-id") or extract_attr(
            anchor, "", "data-linkid"
        )
        if not name or not server_id:
            log.warning("server_entry_incomplete", url=url, name=name, server_id=server_id)
            continue
        servers.append(ServerEntry(name=name, server_id=server_id))
    return servers


class _SourceLink(BaseModel):
    link: str = Field(min_length=1)


def decode_source_link(body: str) -> str | None:
    """Decode ``{"type": "iframe", "link": "<embed url>", ...}``.

    Returns ``None`` for any other shape.
    """
    try:
        return _SourceLink.model_validate_json(body).link
    except ValidationError:
        return None


def _listing_entry(poster: Tag) -> CatalogEntry | None:
    href = extract_attr(poster, "a", "href")
    if not href:
        return None
    return CatalogEntry(
        url=href,
        title=extract_attr(poster, "a", "title"),
        thumbnail_url=extract_attr(poster, "img", "data-src") or extract_attr(poster, "img", "src"),
    )


def parse_listing(html: str) -> CatalogPage:
    """Popular/search/filter listing page → entries + pagination flag."""
    doc = parse_html(html)
    entries = [e for e in map(_listing_entry, doc.select(LISTING_ITEM)) if e]
    return CatalogPage(entries=entries, has_next_page=doc.select_one(NEXT_PAGE) is not None)


def parse_latest(html: str, section: str) -> CatalogPage:
    """Home page → posters of the block whose heading mentions *section*."""
    doc = parse_html(html)
    entries: list[CatalogEntry] = []
    for block in doc.select("section.block_area"):
        if section not in extract_text(block, "h2.cat-heading"):
            continue
        entries.extend(e for e in map(_listing_entry, block.select("div.film-poster")) if e)
    return CatalogPage(entries=entries, has_next_page=False)


def _row_links(doc: Tag, label: str) -> list[str]:
    for row in doc.select("div.row-line"):
        if label in row.get_text(" ", strip=True):
            return [a.get_text(strip=True) for a in row.select("a")]
    return []


def parse_details(html: str, url: str) -> ShowDetails:
    """Watch page → show metadata."""
    doc = parse_html(html)
    poster = require_one(doc, "img.film-poster-img", url=url)
    description = extract_text(doc, f"{WATCH_CONTAINER} div.description")
    status = extract_text(doc, "li.status span.value")
    return ShowDetails(
        title=extract_attr(poster, "", "title"),
        thumbnail_url=extract_attr(poster, "", "src"),
        description=description.replace("Overview:", "").strip(),
        genres=_row_links(doc, "Genre"),
        production=_row_links(doc, "Production"),
        status="ongoing" if status == "Ongoing" else "completed",
    )


def _digits(text: str) -> str:
    return "".join(ch for ch in text if ch.isdigit())
