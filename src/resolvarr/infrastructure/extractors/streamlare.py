"""StreamLare extractor: every ``sources:[{src:"…"}]`` of the packed player."""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._unpacker import safe_unpack

log = structlog.get_logger(__name__)

_SOURCE_RE = re.compile(r'sources:\[\{src:"(.*?)"')


class StreamLareExtractor(BaseExtractor):
    key = "streamlare"
    display_name = "StreamLare"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []
        links = [link for link in _SOURCE_RE.findall(safe_unpack(html)) if link]
        if not links:
            log.warning("streamlare_no_sources", url=request.url)
        return [self._stream(link) for link in links]
