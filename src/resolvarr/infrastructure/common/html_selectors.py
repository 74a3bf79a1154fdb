"""CSS-selector helpers for embed pages, with fallback chains.

Every lookup accepts a primary selector plus optional fallbacks; the
first selector that yields a usable value wins.  Hosts tweak their
player markup often, so extractors list the known variants in order.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string with the ``lxml`` parser."""
    return BeautifulSoup(html, "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Return all elements of the first selector that matches anything."""
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def extract_attr(
    root: BeautifulSoup | Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Read *attr* from the first matching element that carries it."""
    for sel in (selector, *fallback_selectors):
        for match in root.select(sel):
            val = match.get(attr)
            if val:
                return str(val)
    return default


def extract_form_fields(form: Tag) -> dict[str, str]:
    """Collect ``name=value`` pairs of every named ``<input>`` in *form*."""
    fields: dict[str, str] = {}
    for inp in form.select("input[name]"):
        fields[str(inp["name"])] = str(inp.get("value") or "")
    return fields
