"""Tests for CSS-selector helpers."""

from __future__ import annotations

from resolvarr.infrastructure.common.html_selectors import (
    extract_attr,
    extract_form_fields,
    parse_html,
    select_items,
)

_PLAYER_HTML = """\
<html><body>
<div id="megacloud-player" data-id="abc123"></div>
<video><source data-src="/lazy.mp4"><source src="/v/video.mp4"></video>
<ul class="dropdown-menu">
  <li><a data-id="https://player.example/fx/1">FX</a></li>
  <li><a data-id="_default">Default</a></li>
</ul>
<form name="F1" id="F1">
  <input type="hidden" name="op" value="download2">
  <input type="hidden" name="id" value="xyz">
  <input type="hidden" name="rand">
  <input type="submit" value="Go">
</form>
</body></html>
"""


class TestSelectItems:
    def test_first_selector(self) -> None:
        soup = parse_html(_PLAYER_HTML)
        assert len(select_items(soup, ".dropdown-menu a[data-id]")) == 2

    def test_fallback(self) -> None:
        soup = parse_html(_PLAYER_HTML)
        items = select_items(soup, ".missing a", "video source")
        assert len(items) == 2

    def test_nothing(self) -> None:
        assert select_items(parse_html(_PLAYER_HTML), ".a", ".b") == []


class TestExtractAttr:
    def test_reads_attribute(self) -> None:
        soup = parse_html(_PLAYER_HTML)
        assert extract_attr(soup, "#megacloud-player", "data-id") == "abc123"

    def test_skips_elements_without_attr(self) -> None:
        soup = parse_html(_PLAYER_HTML)
        assert extract_attr(soup, "video source", "src") == "/v/video.mp4"

    def test_fallback_and_default(self) -> None:
        soup = parse_html(_PLAYER_HTML)
        assert extract_attr(soup, "#nope", "src", "#also-nope", default="x") == "x"


class TestExtractFormFields:
    def test_named_inputs(self) -> None:
        form = parse_html(_PLAYER_HTML).select_one("form#F1")
        assert form is not None
        assert extract_form_fields(form) == {"op": "download2", "id": "xyz", "rand": ""}
