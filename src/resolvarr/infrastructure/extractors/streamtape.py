"""StreamTape extractor.

The download link is assembled client-side from two string literals:
``robotlink').innerHTML = '<first>'+ ('<junk><second>').substring(n)…``.
"""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor

log = structlog.get_logger(__name__)

_ROBOTLINK_RE = re.compile(
    r"robotlink'\)\.innerHTML\s*=\s*'([^']*)'\s*\+\s*\(\s*'([^']*)'\s*\)"
    r"((?:\.substring\(\d+\))*)"
)
_SUBSTRING_RE = re.compile(r"\.substring\((\d+)\)")
_DEFAULT_SKIP = 3


def build_video_url(html: str) -> str | None:
    """Rebuild the ``get_video`` URL from the robotlink expression."""
    m = _ROBOTLINK_RE.search(html)
    if not m:
        return None
    first, second, calls = m.group(1).strip(), m.group(2), m.group(3)
    if calls:
        skip = sum(int(n) for n in _SUBSTRING_RE.findall(calls))
    else:
        skip = _DEFAULT_SKIP
    url = f"{first}{second[skip:]}"
    return "https:" + url if url.startswith("//") else url


class StreamTapeExtractor(BaseExtractor):
    key = "streamtape"
    display_name = "StreamTape"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []

        if ">Video not found" in html:
            log.info("streamtape_video_not_found", url=request.url)
            return []

        video_url = build_video_url(html)
        if video_url is None:
            log.warning("streamtape_no_robotlink", url=request.url)
            return []
        return [self._stream(video_url)]
