"""StreamOUpload extractor: ``file`` of the packed player."""

from __future__ import annotations

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import first_match
from resolvarr.infrastructure.extractors._unpacker import is_packed, safe_unpack

log = structlog.get_logger(__name__)


class StreamOUploadExtractor(BaseExtractor):
    key = "streamoupload"
    display_name = "StreamOUpload"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=request.url)
        )
        if html is None:
            return []
        if not is_packed(html):
            log.warning("streamoupload_not_packed", url=request.url)
            return []

        unpacked = safe_unpack(html).replace("\\", "")
        video_url = first_match(unpacked, r'file:"([^"]+)"', r"file:'([^']+)'")
        if not video_url:
            log.warning("streamoupload_no_file", url=request.url)
            return []
        return [self._stream(video_url)]
