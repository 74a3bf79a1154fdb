"""StreamWish extractor (streamwish / dhcplay mirrors).

The JWPlayer setup lives in a packed script.  Once unpacked, the HLS
master and caption tracks are read with regexes; the master is then
expanded into quality variants.
"""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import (
    ExtractorRequest,
    RawStream,
    SubtitleTrack,
)
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import origin_of
from resolvarr.infrastructure.extractors._hls import expand_variants
from resolvarr.infrastructure.extractors._unpacker import unpack_all

log = structlog.get_logger(__name__)

_M3U8_RE = re.compile(r"""https?://[^"']+?\.m3u8[^"']*""")
_TRACK_RE = re.compile(
    r'\{file:"([^"]+)",(?:label:"([^"]+)",)?kind:"(thumbnails|captions)"'
)
_THUMBNAIL_HOST = "https://streamwish.com"

_BROWSER_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Upgrade-Insecure-Requests": "1",
}


def _parse_tracks(js: str) -> list[SubtitleTrack]:
    tracks: list[SubtitleTrack] = []
    for m in _TRACK_RE.finditer(js):
        file, label, kind = m.group(1), m.group(2) or "", m.group(3)
        if kind == "thumbnails":
            tracks.append(SubtitleTrack.from_url(_THUMBNAIL_HOST + file, kind, kind))
        else:
            tracks.append(SubtitleTrack.from_url(file, label, label))
    return tracks


class StreamWishExtractor(BaseExtractor):
    key = "streamwish"
    display_name = "StreamWish"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        origin = origin_of(request.url)
        headers = self._headers(
            request,
            referer=origin,
            extra={**_BROWSER_HEADERS, "Origin": origin},
        )
        body = await self._get_text(request.url, headers=headers)
        if body is None:
            return []

        link, unpacked = None, ""
        for candidate in unpack_all(body):
            m = _M3U8_RE.search(candidate)
            if m:
                link, unpacked = m.group(0), candidate
                break
        if link is None:
            log.warning("streamwish_no_m3u8", url=request.url)
            return []

        separator = "&" if "?" in link else "?"
        stream_url = f"{link}{separator}i=0.4"
        main = self._stream(
            stream_url,
            headers=headers,
            subtitles=_parse_tracks(unpacked),
        )

        variants = await expand_variants(
            self._http,
            stream_url,
            source_label=self.display_name,
            headers=headers,
            base_url=link.split("master.m3u8")[0],
            timeout=self._timeout,
        )
        return [main, *variants]
