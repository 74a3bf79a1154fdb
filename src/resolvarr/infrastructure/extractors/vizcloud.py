"""VizCloud / vidstream.pro extractor: every ``file:"…"`` on the page."""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor

log = structlog.get_logger(__name__)

_FILE_RE = re.compile(r'file:\s*"([^"]+)"')


class VizCloudExtractor(BaseExtractor):
    key = "vizcloud"
    display_name = "VizCloud"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []
        files = [f for f in _FILE_RE.findall(html) if f]
        if not files:
            log.warning("vizcloud_no_sources", url=request.url)
        return [self._stream(f) for f in files]
