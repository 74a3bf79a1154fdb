"""VidHide extractor (filelions / *lions / smoothpre mirrors).

The JWPlayer config sits in a packed script; its ``links`` object maps
``hls2``/``hls4`` to the master playlist (``hls4`` is origin-relative).
"""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import first_match, resolve_url
from resolvarr.infrastructure.extractors._unpacker import unpack_all

log = structlog.get_logger(__name__)

_LINK_PATTERNS = (
    re.compile(r'"hls2"\s*:\s*"([^"]+)"'),
    re.compile(r'"hls4"\s*:\s*"([^"]+)"'),
    re.compile(r'"hls3"\s*:\s*"([^"]+)"'),
    re.compile(r"""file\s*:\s*["']([^"']+\.m3u8[^"']*)"""),
)


class VidHideExtractor(BaseExtractor):
    key = "vidhide"
    display_name = "VidHide"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=request.url)
        )
        if not html:
            return []

        for unpacked in [*unpack_all(html), html]:
            link = first_match(unpacked.replace("\\/", "/"), *_LINK_PATTERNS)
            if link:
                return [
                    self._stream(
                        resolve_url(request.url, link),
                        is_m3u8=True,
                        headers={"Referer": request.url},
                    )
                ]
        log.warning("vidhide_no_source", url=request.url)
        return []
