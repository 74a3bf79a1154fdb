"""SpeedoStream extractor: a plain ``file:"…"`` field."""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import origin_of

log = structlog.get_logger(__name__)

_FILE_RE = re.compile(r'file:"([^"]+)"')


class SpeedoStreamExtractor(BaseExtractor):
    key = "speedostream"
    display_name = "SpeedoStream"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url,
            headers=self._headers(request, referer=origin_of(request.url) + "/"),
        )
        if html is None:
            return []
        m = _FILE_RE.search(html)
        if not m:
            log.warning("speedostream_no_file", url=request.url)
            return []
        return [self._stream(m.group(1))]
