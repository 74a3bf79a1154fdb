"""Kwik extractor (animepahe player): packed script holding an HLS URL."""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._unpacker import unpack_all

log = structlog.get_logger(__name__)

_REFERER = "https://animepahe.ru/"
_SOURCE_RE = re.compile(r"https.*?m3u8")


class KwikExtractor(BaseExtractor):
    key = "kwik"
    display_name = "Kwik"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=_REFERER)
        )
        if html is None:
            return []

        for unpacked in unpack_all(html):
            m = _SOURCE_RE.search(unpacked)
            if m:
                return [
                    self._stream(
                        m.group(0),
                        headers={"Referer": request.url},
                    )
                ]
        log.warning("kwik_no_source", url=request.url)
        return []
