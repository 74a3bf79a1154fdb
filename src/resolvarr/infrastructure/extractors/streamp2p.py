"""StreamP2P extractor.

``/api/v1/video`` answers with hex-encoded AES-CBC ciphertext of a JSON
document holding ``source`` (or ``file``).
"""

from __future__ import annotations

import json
from urllib.parse import urlparse

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._codecs import aes_cbc_decrypt, hex_to_bytes
from resolvarr.infrastructure.extractors._common import origin_of

log = structlog.get_logger(__name__)

KEY = "kiemtienmua911ca"
IV = "1234567890oiuytr"


def video_id_of(url: str) -> str:
    """The URL fragment, or the last path segment when there is none."""
    parsed = urlparse(url)
    if parsed.fragment:
        return parsed.fragment
    return parsed.path.rstrip("/").rsplit("/", 1)[-1]


def decrypt_video_payload(hex_data: str) -> dict:
    plain = aes_cbc_decrypt(hex_to_bytes(hex_data), KEY, IV)
    return json.loads(plain.decode("utf-8"))


class StreamP2PExtractor(BaseExtractor):
    key = "streamp2p"
    display_name = "StreamP2P"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        video_id = video_id_of(request.url)
        if not video_id:
            log.warning("streamp2p_no_video_id", url=request.url)
            return []

        origin = origin_of(request.url)
        encrypted = await self._get_text(
            f"{origin}/api/v1/video",
            headers=self._headers(request, referer=f"{origin}/"),
            params={"id": video_id},
        )
        if not encrypted or not encrypted.strip():
            log.warning("streamp2p_empty_payload", url=request.url)
            return []

        data = decrypt_video_payload(encrypted)
        video_url = data.get("source") or data.get("file")
        if not isinstance(video_url, str) or not video_url:
            log.warning("streamp2p_no_source", url=request.url)
            return []
        return [self._stream(video_url)]
