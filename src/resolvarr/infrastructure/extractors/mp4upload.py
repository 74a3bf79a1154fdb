"""Mp4Upload extractor: the ``player.src({type, src})`` call."""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor

log = structlog.get_logger(__name__)

_PLAYER_SRC_RE = re.compile(
    r'player\.src\(\s*\{\s*type:\s*"[^"]+",\s*src:\s*"([^"]+)"\s*\}\s*\)',
    re.DOTALL,
)


class Mp4UploadExtractor(BaseExtractor):
    key = "mp4upload"
    display_name = "Mp4Upload"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []
        m = _PLAYER_SRC_RE.search(html)
        if not m:
            log.warning("mp4upload_no_player_src", url=request.url)
            return []
        return [self._stream(m.group(1), headers={"Referer": request.url})]
