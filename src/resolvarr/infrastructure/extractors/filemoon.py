"""Filemoon extractor.

The landing page only embeds an iframe; the iframe document carries the
JWPlayer config inside a packed script.
"""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import extract_attr, parse_html
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import (
    first_match,
    origin_of,
    resolve_url,
)
from resolvarr.infrastructure.extractors._unpacker import unpack_all

log = structlog.get_logger(__name__)

_SOURCES_RE = re.compile(r'sources:\[\{file:"(.*?)"')
_FILE_M3U8_RE = re.compile(r"""file\s*:\s*["'](https?://[^"']+\.m3u8[^"']*)""")

_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,*/*;q=0.8"
)


class FilemoonExtractor(BaseExtractor):
    key = "filemoon"
    display_name = "Filemoon"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        headers = self._headers(
            request,
            referer=origin_of(request.url),
            extra={"Accept": _ACCEPT, "Origin": request.url},
        )
        html = await self._get_text(request.url, headers=headers)
        if html is None:
            return []

        iframe_src = extract_attr(parse_html(html), "iframe", "src")
        if not iframe_src:
            log.warning("filemoon_no_iframe", url=request.url)
            return []
        iframe_url = resolve_url(request.url, iframe_src)

        iframe_html = await self._get_text(iframe_url, headers=headers)
        if iframe_html is None:
            return []

        for unpacked in unpack_all(iframe_html):
            link = first_match(unpacked, _SOURCES_RE, _FILE_M3U8_RE)
            if link:
                return [
                    self._stream(
                        link,
                        is_m3u8=True,
                        headers={"Referer": iframe_url},
                    )
                ]
        log.warning("filemoon_no_source", url=iframe_url)
        return []
