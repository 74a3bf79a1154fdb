"""MultiQuality extractor: ``_juicycodes`` payload decoding.

The payload is base64 (with ``_``/``-`` standing in for ``+``/``/``) of
a ROT13-scrambled player config, followed by a three character salt.
"""

from __future__ import annotations

import re

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._codecs import b64_to_text, rot13

log = structlog.get_logger(__name__)

REFERER = "https://swift.multiquality.click"

_JUICY_RE = re.compile(r"_juicycodes\(\s*([^)]+)", re.IGNORECASE)
_TOKEN_RE = re.compile(r"""(["'])([A-Za-z0-9_\-]{40,}={0,3})\1""")
_M3U8_RE = re.compile(r'"file":"(https?://[^"]+\.m3u8)"')
_SALT_LEN = 3


def find_payload(html: str) -> str | None:
    m = _JUICY_RE.search(html)
    if m:
        raw = m.group(1).strip()
        if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in "'\"":
            raw = raw[1:-1]
        return raw or None
    m = _TOKEN_RE.search(html)
    return m.group(2) if m else None


def decode_juicycodes(code: str) -> str:
    encoded = code[:-_SALT_LEN].replace("_", "+").replace("-", "/")
    return rot13(b64_to_text(encoded)).replace("\\/", "/")


class MultiQualityExtractor(BaseExtractor):
    key = "multiquality"
    display_name = "MultiQuality"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=REFERER)
        )
        if html is None:
            return []
        code = find_payload(html)
        if not code:
            log.warning("multiquality_no_payload", url=request.url)
            return []

        m = _M3U8_RE.search(decode_juicycodes(code))
        if not m:
            log.warning("multiquality_no_file", url=request.url)
            return []
        return [self._stream(m.group(1), is_m3u8=True)]
