"""Vcdnlare extractor: the page's ``<source src>``."""

from __future__ import annotations

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import extract_attr, parse_html
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import resolve_url

log = structlog.get_logger(__name__)


class VcdnlareExtractor(BaseExtractor):
    key = "vcdnlare"
    display_name = "Vcdnlare"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=request.url)
        )
        if html is None:
            return []
        src = extract_attr(parse_html(html), "source", "src", "video source")
        if not src:
            log.warning("vcdnlare_no_source", url=request.url)
            return []
        return [self._stream(resolve_url(request.url, src))]
