"""PixFusion extractor.

The packed player boots ``FirePlayer("<id>", …)``; the id is exchanged
for the stream URL through ``/player/index.php?do=getVideo``.
"""

from __future__ import annotations

import re
from typing import Any

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import is_absolute_url, origin_of
from resolvarr.infrastructure.extractors._unpacker import safe_unpack

log = structlog.get_logger(__name__)

_FIREPLAYER_RE = re.compile(r'FirePlayer\("(.*?)"')


def video_url_from_response(text: str, data: Any) -> str | None:
    """``videoSource``/``securedLink`` of a JSON body, else the body itself."""
    if isinstance(data, dict):
        for key in ("videoSource", "securedLink"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
        return None
    text = text.strip()
    return text if is_absolute_url(text) else None


class PixFusionExtractor(BaseExtractor):
    key = "pixfusion"
    display_name = "PixFusion"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        headers = self._headers(
            request,
            referer=request.url,
            extra={"X-Requested-With": "XMLHttpRequest"},
        )
        html = await self._get_text(request.url, headers=headers)
        if html is None:
            return []
        m = _FIREPLAYER_RE.search(safe_unpack(html).replace("\\", ""))
        if not m:
            log.warning("pixfusion_no_video_id", url=request.url)
            return []

        resp = await self._request(
            "POST",
            f"{origin_of(request.url)}/player/index.php",
            headers=headers,
            params={"data": m.group(1), "do": "getVideo"},
        )
        if resp is None:
            return []
        try:
            data = resp.json()
        except ValueError:
            data = None
        video_url = video_url_from_response(resp.text, data)
        if not video_url:
            log.warning("pixfusion_no_video_url", url=request.url)
            return []
        return [self._stream(video_url)]
