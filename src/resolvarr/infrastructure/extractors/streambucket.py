"""StreamBucket extractor: first absolute ``file`` of the packed player."""

from __future__ import annotations

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import first_match
from resolvarr.infrastructure.extractors._unpacker import unpack_all

log = structlog.get_logger(__name__)


class StreamBucketExtractor(BaseExtractor):
    key = "streambucket"
    display_name = "StreamBucket"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=request.url)
        )
        if html is None:
            return []
        for script in [*unpack_all(html), html]:
            video_url = first_match(
                script.replace("\\", ""),
                r'file:"(https?://[^"]+)"',
                r"file:'(https?://[^']+)'",
            )
            if video_url:
                return [self._stream(video_url)]
        log.warning("streambucket_no_file", url=request.url)
        return []
