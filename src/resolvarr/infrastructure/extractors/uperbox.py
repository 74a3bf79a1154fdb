"""Uperbox extractor: two hops to the "start download" link."""

from __future__ import annotations

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import extract_attr, parse_html
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import origin_of, resolve_url

log = structlog.get_logger(__name__)


class UperboxExtractor(BaseExtractor):
    key = "uperbox"
    display_name = "Uperbox"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        origin = origin_of(request.url)
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=origin)
        )
        if html is None:
            return []
        next_href = extract_attr(parse_html(html), ".main-container a.btn", "href")
        if not next_href:
            log.warning("uperbox_no_next_link", url=request.url)
            return []

        next_url = resolve_url(request.url, next_href, path_relative=True)
        html = await self._get_text(
            next_url, headers=self._headers(referer=request.url)
        )
        if html is None:
            return []
        download_href = next(
            (
                str(a.get("href"))
                for a in parse_html(html).select("a[href]")
                if "start download" in a.get_text().lower()
            ),
            None,
        )
        if not download_href:
            log.warning("uperbox_no_download_link", url=next_url)
            return []
        return [self._stream(resolve_url(origin, download_href))]
