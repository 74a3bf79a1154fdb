"""MixDrop extractor: ``MDCore.wurl`` inside the packed player script."""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import resolve_url
from resolvarr.infrastructure.extractors._unpacker import unpack_all

log = structlog.get_logger(__name__)

_WURL_RE = re.compile(r'wurl="([^"]+)"')


class MixDropExtractor(BaseExtractor):
    key = "mixdrop"
    display_name = "MixDrop"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []

        for unpacked in unpack_all(html):
            m = _WURL_RE.search(unpacked)
            if not m:
                continue
            source = resolve_url(request.url, m.group(1))
            return [self._stream(source, headers={"Referer": request.url})]

        log.warning("mixdrop_no_wurl", url=request.url)
        return []
