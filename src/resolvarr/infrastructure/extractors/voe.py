"""Voe extractor.

The landing page only redirects through ``window.location.href``; the
player page carries the HLS URL base64-encoded under ``'hls'``.
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
from resolvarr.infrastructure.extractors._codecs import b64_to_text
from resolvarr.infrastructure.extractors._common import (
    is_absolute_url,
    origin_of,
    resolve_url,
)

log = structlog.get_logger(__name__)

_REDIRECT_RE = re.compile(r"window\.location\.href\s*=\s*'(https://[^']+)'")
_HLS_RE = re.compile(r"'hls'\s*:\s*'([^']+)'", re.DOTALL)
_MP4_RE = re.compile(r"'mp4'\s*:\s*'([^']+)'", re.DOTALL)
_TRACK_RE = re.compile(
    r'<track\s+kind="(?:subtitles|captions)"\s+label="([^"]+)"'
    r'\s+srclang="([^"]+)"\s+src="([^"]+)"'
)
_THUMBNAILS_RE = re.compile(r'previewThumbnails:\s*\{[^}]*src:\s*\["([^"]+)"\]')


def decode_source(body: str) -> str | None:
    """Base64 ``'hls'`` value, a plain ``'hls'`` URL, then ``'mp4'``."""
    m = _HLS_RE.search(body)
    if m:
        value = m.group(1)
        if is_absolute_url(value):
            return value
        try:
            return b64_to_text(value)
        except ValueError:
            log.debug("voe_hls_not_base64")
    m = _MP4_RE.search(body)
    if m:
        value = m.group(1)
        if is_absolute_url(value):
            return value
        try:
            return b64_to_text(value)
        except ValueError:
            return None
    return None


def parse_tracks(body: str, origin: str) -> list[SubtitleTrack]:
    tracks = [
        SubtitleTrack.from_url(resolve_url(origin, src), label, label)
        for label, _lang, src in _TRACK_RE.findall(body)
        if src
    ]
    m = _THUMBNAILS_RE.search(body)
    if m:
        tracks.append(
            SubtitleTrack.from_url(
                resolve_url(origin, m.group(1)), "thumbnails", "thumbnails"
            )
        )
    return tracks


class VoeExtractor(BaseExtractor):
    key = "voe"
    display_name = "Voe"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        headers = self._headers(request)
        body = await self._get_text(request.url, headers=headers)
        if body is None:
            return []

        redirect = _REDIRECT_RE.search(body)
        if redirect:
            body = await self._get_text(redirect.group(1), headers=headers)
            if body is None:
                return []

        source = decode_source(body)
        if not source:
            log.warning("voe_no_hls", url=request.url)
            return []
        return [
            self._stream(
                source,
                subtitles=parse_tracks(body, origin_of(request.url)),
            )
        ]
