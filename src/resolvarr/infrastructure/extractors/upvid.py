"""UpVid / tatavid extractor.

``input#func`` holds base64 RC4 ciphertext of the player setup; the key
is a string literal in one of the page scripts.
"""

from __future__ import annotations

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import extract_attr, parse_html
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._codecs import b64decode_padded, rc4_crypt
from resolvarr.infrastructure.extractors._common import first_match

log = structlog.get_logger(__name__)

_KEY_PATTERNS = (
    r"=\s*\w+\('([^']+)'\)",
    r'=\s*\w+\("([^"]+)"\)',
    r"key\s*[:=]\s*'([^']+)'",
    r'key\s*[:=]\s*"([^"]+)"',
)
_LITERAL_KEY_PATTERN = r"'([A-Za-z0-9]{6,36})'"
_SRC_PATTERNS = (
    r"'src'\s*,\s*'([^']+)'",
    r"src:\s*'([^']+)'",
    r'src:\s*"([^"]+)"',
)


def find_rc4_key(html: str) -> str | None:
    scripts = "\n".join(s.get_text() for s in parse_html(html).select("script"))
    return first_match(scripts, *_KEY_PATTERNS) or first_match(
        html, _LITERAL_KEY_PATTERN
    )


def decrypt_setup(payload: str, key: str) -> str:
    return rc4_crypt(b64decode_padded(payload), key).decode("utf-8")


class UpVidExtractor(BaseExtractor):
    key = "upvid"
    display_name = "UpVid"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=request.url)
        )
        if html is None:
            return []
        payload = extract_attr(parse_html(html), "input#func", "value")
        if not payload:
            log.warning("upvid_no_payload", url=request.url)
            return []
        rc4_key = find_rc4_key(html)
        if not rc4_key:
            log.warning("upvid_no_key", url=request.url)
            return []

        video_url = first_match(decrypt_setup(payload, rc4_key), *_SRC_PATTERNS)
        if not video_url:
            log.warning("upvid_no_src", url=request.url)
            return []
        return [self._stream(video_url)]
