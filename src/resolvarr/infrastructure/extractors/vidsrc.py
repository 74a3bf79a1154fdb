"""VidSrc extractor: player iframe, then the prorcp frame, then ``file``."""

from __future__ import annotations

import re
from urllib.parse import urlparse

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import extract_attr, parse_html
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import origin_of, resolve_url

log = structlog.get_logger(__name__)

_PRORCP_RE = re.compile(r"src:\s*'(.*?)'")
_FILE_RE = re.compile(r"""file:\s*['"]([^'"]+)['"]""")


def alternate_url(url: str) -> str | None:
    """The ``.xyz`` mirror of a ``.to`` page, if *url* is on a ``.to`` host."""
    parsed = urlparse(url)
    if not parsed.netloc.endswith(".to"):
        return None
    return parsed._replace(netloc=parsed.netloc[: -len(".to")] + ".xyz").geturl()


class VidSrcExtractor(BaseExtractor):
    key = "vidsrc"
    display_name = "VidSrc"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        headers = self._headers(request, referer=origin_of(request.url) + "/")
        iframe_src = await self._player_iframe(request.url, headers)
        if not iframe_src:
            alt = alternate_url(request.url)
            if alt:
                log.debug("vidsrc_trying_mirror", url=alt)
                iframe_src = await self._player_iframe(alt, headers)
        if not iframe_src:
            log.warning("vidsrc_no_player_iframe", url=request.url)
            return []

        iframe_url = resolve_url(request.url, iframe_src)
        iframe_html = await self._get_text(iframe_url, headers=headers)
        if iframe_html is None:
            return []
        prorcp = _PRORCP_RE.search(iframe_html)
        if not prorcp:
            log.warning("vidsrc_no_prorcp", url=iframe_url)
            return []

        final_html = await self._get_text(
            resolve_url(iframe_url, prorcp.group(1)),
            headers=self._headers(referer=iframe_url),
        )
        if final_html is None:
            return []
        m = _FILE_RE.search(final_html)
        if not m:
            log.warning("vidsrc_no_file", url=request.url)
            return []
        return [self._stream(m.group(1))]

    async def _player_iframe(self, url: str, headers: dict[str, str]) -> str:
        html = await self._get_text(url, headers=headers)
        if html is None:
            return ""
        return extract_attr(parse_html(html), "#player_iframe", "src")
