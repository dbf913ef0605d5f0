"""CSS-selector-based HTML extraction with fallback chains.

Lenient helpers (``select_items``, ``extract_text``, ``extract_attr``)
return a default when nothing matches.  Strict helpers (``require_*``)
raise ``StructuralParseError`` instead, for markup a page cannot be
understood without.  An element that exists but has no text is *not*
missing.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from dopeflix.domain.exceptions import StructuralParseError


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string (full page or ajax fragment) with lxml."""
    return BeautifulSoup(html, "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Select elements via CSS with a fallback chain.

    Tries each selector in order.  Returns results from the **first**
    selector that matches at least one element.
    """
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def extract_text(
    element: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
    default: str = "",
    strip: bool = True,
) -> str:
    """Extract text from the first matching child element.

    With ``selector=""`` the element's own text is returned.
    """
    if selector == "":
        text = element.get_text(" ", strip=strip)
        return text if text else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            text = match.get_text(" ", strip=strip)
            if text:
                return text
    return default


def extract_attr(
    element: BeautifulSoup | Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Extract an HTML attribute from the first matching child element.

    With ``selector=""`` the attribute is read from *element* itself.
    """
    if selector == "":
        val = element.get(attr)
        return str(val) if val else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            val = match.get(attr)
            if val:
                return str(val)
    return default


def require_one(
    root: BeautifulSoup | Tag,
    selector: str,
    *,
    url: str = "",
) -> Tag:
    """Return the first element matching *selector* or raise."""
    match = root.select_one(selector)
    if match is None:
        raise StructuralParseError(selector, url)
    return match


def require_attr(element: Tag, attr: str, *, url: str = "") -> str:
    """Return a non-blank attribute value of *element* or raise."""
    val = element.get(attr)
    if isinstance(val, list):
        val = " ".join(val)
    if not val or not str(val).strip():
        raise StructuralParseError(f"{element.name}[{attr}]", url)
    return str(val).strip()


def require_text(
    root: BeautifulSoup | Tag,
    selector: str,
    *,
    url: str = "",
) -> str:
    """Return the text of the first element matching *selector* or raise.

    The element must exist; its text may be empty.
    """
    return require_one(root, selector, url=url).get_text(" ", strip=True)
