"""Photojin extractor: the ``DOWNLOAD_GENERATE`` action."""

from __future__ import annotations

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import parse_html
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import origin_of

log = structlog.get_logger(__name__)


class PhotojinExtractor(BaseExtractor):
    key = "photojin"
    display_name = "Photojin"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []
        field = parse_html(html).select_one("#generate_url")
        uid = field.get("data-uid") if field is not None else None
        token = field.get("data-token") if field is not None else None
        if not uid or not token:
            log.warning("photojin_missing_fields", url=request.url)
            return []

        origin = origin_of(request.url)
        resp = await self._request(
            "POST",
            f"{origin}/action",
            headers=self._headers(
                referer=origin,
                extra={"X-Requested-With": "xmlhttprequest"},
            ),
            json_body={
                "type": "DOWNLOAD_GENERATE",
                "payload": {"uid": str(uid), "access_token": str(token)},
            },
        )
        if resp is None:
            return []
        data = resp.json()
        video_url = data.get("download_url") if isinstance(data, dict) else None
        if not video_url:
            log.warning("photojin_no_download_url", url=request.url)
            return []
        return [self._stream(video_url)]
