"""Rubystream extractor: submit form ``F1`` to ``/dl`` and unpack the answer."""

from __future__ import annotations

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import (
    extract_form_fields,
    parse_html,
)
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import first_match, origin_of
from resolvarr.infrastructure.extractors._unpacker import safe_unpack

log = structlog.get_logger(__name__)


class RubystreamExtractor(BaseExtractor):
    key = "rubystream"
    display_name = "Rubystream"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        origin = origin_of(request.url)
        headers = self._headers(request, referer=origin)
        html = await self._get_text(request.url, headers=headers)
        if html is None:
            return []
        form = parse_html(html).select_one("form#F1")
        if form is None:
            log.warning("rubystream_no_form", url=request.url)
            return []

        fields = extract_form_fields(form)
        fields["file_code"] = request.url.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
        fields["referer"] = origin

        resp = await self._request("POST", f"{origin}/dl", headers=headers, data=fields)
        if resp is None:
            return []
        unpacked = safe_unpack(resp.text).replace("\\", "")
        video_url = first_match(unpacked, r'file:"(.*?)"', r"file:'(.*?)'")
        if not video_url:
            log.warning("rubystream_no_file", url=request.url)
            return []
        return [self._stream(video_url)]
