"""VidCloud extractor: every ``file:"…"`` on the embed page.

HLS masters are kept and additionally expanded into per-quality
variants.
"""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._hls import expand_variants

log = structlog.get_logger(__name__)

_FILE_RE = re.compile(r'file:\s*"([^"]+)"')


class VidCloudExtractor(BaseExtractor):
    key = "vidcloud"
    display_name = "VidCloud"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        headers = self._headers(
            request,
            referer=request.url,
            extra={"X-Requested-With": "XMLHttpRequest"},
        )
        body = await self._get_text(request.url, headers=headers)
        if body is None:
            return []

        streams = [
            self._stream(m.group(1), headers=headers)
            for m in _FILE_RE.finditer(body)
        ]
        if not streams:
            log.warning("vidcloud_no_sources", url=request.url)
            return []

        variants: list[RawStream] = []
        for stream in streams:
            if stream.is_m3u8:
                variants.extend(
                    await expand_variants(
                        self._http,
                        stream.url,
                        source_label=self.display_name,
                        headers=headers,
                        timeout=self._timeout,
                    )
                )
        return streams + variants
