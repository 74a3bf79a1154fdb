"""VidMoly extractor: ``file:"…"`` plus HLS variants."""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._hls import expand_variants

log = structlog.get_logger(__name__)

_FILE_RE = re.compile(r'file:\s*"([^"]+)"')


class VidMolyExtractor(BaseExtractor):
    key = "vidmoly"
    display_name = "VidMoly"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []
        m = _FILE_RE.search(html)
        if not m:
            log.warning("vidmoly_no_file", url=request.url)
            return []

        link = m.group(1)
        if ".m3u8" not in link:
            return [self._stream(link)]
        return await expand_variants(
            self._http,
            link,
            source_label=self.display_name,
            headers={"Referer": request.url},
            include_master=True,
            timeout=self._timeout,
        )
