"""Send extractor: posting form ``F1`` answers with a redirect to the file."""

from __future__ import annotations

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import (
    extract_form_fields,
    parse_html,
)
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import origin_of

log = structlog.get_logger(__name__)


class SendExtractor(BaseExtractor):
    key = "send"
    display_name = "Send"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        origin = origin_of(request.url) + "/"
        headers = self._headers(request, referer=origin)
        html = await self._get_text(request.url, headers=headers)
        if html is None:
            return []
        form = parse_html(html).select_one('form[name="F1"]')
        if form is None:
            log.warning("send_no_form", url=request.url)
            return []

        resp = await self._request(
            "POST",
            origin,
            headers=headers,
            data=extract_form_fields(form),
            follow_redirects=False,
        )
        location = resp.headers.get("location") if resp is not None else None
        if not location:
            log.warning("send_no_redirect", url=request.url)
            return []
        return [self._stream(location)]
