"""Mp4Player extractor.

The page calls ``sniff(...)`` with the path pieces of the HLS master;
only variants that declare a BANDWIDTH are kept.
"""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import host_of
from resolvarr.infrastructure.extractors._hls import expand_variants

log = structlog.get_logger(__name__)

_SNIFF_RE = re.compile(r"sniff\((.*)\)", re.DOTALL)
_MIN_ARGS = 8


def parse_sniff_args(html: str) -> list[str] | None:
    m = _SNIFF_RE.search(html)
    if not m:
        return None
    args = [a.strip() for a in m.group(1).replace('"', "").split(",")]
    return args if len(args) >= _MIN_ARGS else None


class Mp4PlayerExtractor(BaseExtractor):
    key = "mp4player"
    display_name = "Mp4Player"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []
        args = parse_sniff_args(html)
        if args is None:
            log.warning("mp4player_no_sniff", url=request.url)
            return []

        master = (
            f"https://{host_of(request.url)}/m3u8/{args[1]}/{args[2]}"
            f"/master.txt?s=1&cache={args[7]}"
        )
        return await expand_variants(
            self._http,
            master,
            source_label=self.display_name,
            headers={"Accept": "*/*", "Referer": request.url},
            require_bandwidth=True,
            fallback_to_master=True,
            timeout=self._timeout,
        )
