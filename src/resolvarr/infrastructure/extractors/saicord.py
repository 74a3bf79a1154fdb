"""Saicord extractor: the player config hides behind ``atob("…")``."""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import parse_html
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._codecs import b64_to_text
from resolvarr.infrastructure.extractors._common import first_match

log = structlog.get_logger(__name__)

REFERER = "https://saicord.com/"

_ATOB_RE = re.compile(r'atob\("([^"]+)"\)')


def find_atob_payload(html: str) -> str | None:
    """Prefer scripts inside ``div.player-iframe``, then any ``atob`` call."""
    player = parse_html(html).select_one("div.player-iframe")
    if player is not None:
        for script in player.select("script"):
            m = _ATOB_RE.search(script.get_text())
            if m:
                return m.group(1)
    m = _ATOB_RE.search(html)
    return m.group(1) if m else None


class SaicordExtractor(BaseExtractor):
    key = "saicord"
    display_name = "Saicord"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=REFERER)
        )
        if html is None:
            return []
        encoded = find_atob_payload(html)
        if not encoded:
            log.warning("saicord_no_payload", url=request.url)
            return []

        video_url = first_match(
            b64_to_text(encoded), r'file:"([^"]+)"', r"file:'([^']+)'"
        )
        if not video_url:
            log.warning("saicord_no_file", url=request.url)
            return []
        return [self._stream(video_url)]
