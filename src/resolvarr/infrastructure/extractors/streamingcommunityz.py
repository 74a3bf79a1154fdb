"""StreamingCommunity / vixcloud extractor.

The iframe page assigns ``window.masterPlaylist = {url, params, …}`` as
a JavaScript object literal; its ``params`` are merged into the master
URL's query.
"""

from __future__ import annotations

import json
import re
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlparse

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import extract_attr, parse_html
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import origin_of, resolve_url

log = structlog.get_logger(__name__)

_MASTER_RE = re.compile(r"window\.masterPlaylist\s*=\s*(\{[\s\S]*?\})\s*\n")
_STRING_RE = re.compile(r"\"(?:[^\"\\]|\\.)*\"|'(?:[^'\\]|\\.)*'")
_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_$][\w$]*)\s*:")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_UNDEFINED_RE = re.compile(r"\bundefined\b")


def _relax_code(code: str) -> str:
    code = _KEY_RE.sub(r'\1"\2":', code)
    code = _UNDEFINED_RE.sub("null", code)
    return _TRAILING_COMMA_RE.sub(r"\1", code)


def _relax_string(literal: str) -> str:
    if literal.startswith('"'):
        return literal
    inner = literal[1:-1].replace("\\'", "'").replace('"', '\\"')
    return f'"{inner}"'


def parse_js_object(text: str) -> dict[str, Any]:
    """Parse a JS object literal that is almost JSON.

    Tolerates single-quoted strings, unquoted keys, ``undefined`` and
    trailing commas; string contents are never rewritten.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    parts: list[str] = []
    pos = 0
    for m in _STRING_RE.finditer(text):
        parts.append(_relax_code(text[pos : m.start()]))
        parts.append(_relax_string(m.group(0)))
        pos = m.end()
    parts.append(_relax_code(text[pos:]))
    return json.loads("".join(parts))


def build_master_url(playlist: dict[str, Any]) -> str | None:
    """Master URL with ``params`` merged into its query and ``h=1`` added."""
    master = playlist.get("url")
    if not isinstance(master, str) or not master:
        return None
    parsed = urlparse(master)
    query = dict(parse_qsl(parsed.query, keep_blank_values=True))
    for key, value in (playlist.get("params") or {}).items():
        if isinstance(value, list):
            value = value[0] if value else ""
        query[key] = "" if value is None else str(value)
    query["h"] = "1"
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}?{urlencode(query)}"


class StreamingCommunityzExtractor(BaseExtractor):
    key = "streamingcommunityz"
    display_name = "StreamingCommunityz"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        headers = self._headers(
            request,
            referer=origin_of(request.url) + "/",
            extra={"Accept": "text/html,application/xhtml+xml,*/*;q=0.8"},
        )
        page_url = request.url.replace("/watch/", "/iframe/")
        body = await self._get_text(page_url, headers=headers)
        if body is None:
            return []

        match = _MASTER_RE.search(body)
        if match is None:
            iframe = extract_attr(parse_html(body), "iframe", "src")
            if iframe:
                body = await self._get_text(
                    resolve_url(page_url, iframe), headers=headers
                )
                match = _MASTER_RE.search(body or "")
        if match is None:
            log.warning("streamingcommunityz_no_master_playlist", url=request.url)
            return []

        master_url = build_master_url(parse_js_object(match.group(1)))
        if not master_url:
            log.warning("streamingcommunityz_no_master_url", url=request.url)
            return []
        return [self._stream(master_url, is_m3u8=True)]
