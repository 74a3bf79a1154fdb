"""StreamHub extractor: packed player config, then HLS variants."""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._hls import expand_variants
from resolvarr.infrastructure.extractors._unpacker import safe_unpack

log = structlog.get_logger(__name__)

_SOURCE_RE = re.compile(r'sources:\[\{src:"(.*?)"')


class StreamHubExtractor(BaseExtractor):
    key = "streamhub"
    display_name = "StreamHub"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []
        m = _SOURCE_RE.search(safe_unpack(html))
        if not m:
            log.warning("streamhub_no_source", url=request.url)
            return []

        link = m.group(1)
        if ".m3u8" not in link:
            return [self._stream(link)]
        return await expand_variants(
            self._http,
            link,
            source_label=self.display_name,
            headers={"Referer": link},
            include_master=True,
            timeout=self._timeout,
        )
