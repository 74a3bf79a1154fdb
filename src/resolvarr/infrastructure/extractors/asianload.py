"""AsianLoad extractor.

Same AJAX handshake as GogoCDN with a single AES-256-CBC key: the crypto
token lives in ``script[data-name="crypto"]`` and is passed as alias.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from resolvarr.domain.entities.streams import (
    ExtractorRequest,
    RawStream,
    SubtitleTrack,
)
from resolvarr.infrastructure.common.html_selectors import extract_attr, parse_html
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._codecs import (
    aes_cbc_decrypt,
    aes_cbc_encrypt,
    b64decode_padded,
    b64encode_text,
)
from resolvarr.infrastructure.extractors._common import (
    first_match,
    label_backup,
    origin_of,
)

log = structlog.get_logger(__name__)

KEY = "93422192433952489752342908585752"
IV = "9262859232435825"

_THUMBNAILS_NAME = "Default (maybe)"


def encrypt_text(text: str) -> str:
    return b64encode_text(aes_cbc_encrypt(text.encode("utf-8"), KEY, IV))


def decrypt_text(data: str) -> str:
    return aes_cbc_decrypt(b64decode_padded(data), KEY, IV).decode("utf-8")


def _track_name(kind: str) -> str:
    return _THUMBNAILS_NAME if kind == "thumbnails" else kind


class AsianLoadExtractor(BaseExtractor):
    key = "asianload"
    display_name = "AsianLoad"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        video_id = first_match(request.url, r"[?&]id=([^&]+)")
        if not video_id:
            log.warning("asianload_missing_id", url=request.url)
            return []

        html = await self._get_text(request.url, headers=self._headers(request))
        if html is None:
            return []
        crypto = extract_attr(parse_html(html), 'script[data-name="crypto"]', "data-value")
        if not crypto:
            log.warning("asianload_crypto_missing", url=request.url)
            return []

        ajax_url = (
            f"{origin_of(request.url)}/encrypt-ajax.php"
            f"?id={encrypt_text(video_id)}&alias={decrypt_text(crypto)}"
        )
        payload = await self._get_json(
            ajax_url,
            headers=self._headers(extra={"X-Requested-With": "XMLHttpRequest"}),
        )
        encrypted = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(encrypted, str):
            log.warning("asianload_unexpected_payload", url=request.url)
            return []

        decrypted: dict[str, Any] = json.loads(decrypt_text(encrypted))
        if not decrypted.get("source"):
            log.warning("asianload_no_source", url=request.url)
            return []

        tracks = (decrypted.get("track") or {}).get("tracks") or []
        subtitles = [
            SubtitleTrack.from_url(
                t["file"],
                _track_name(t.get("kind") or ""),
                _track_name(t.get("kind") or ""),
            )
            for t in tracks
            if isinstance(t, dict) and t.get("file")
        ]

        streams = [
            self._stream(src["file"], subtitles=subtitles)
            for src in decrypted["source"]
            if isinstance(src, dict) and src.get("file")
        ]
        streams.extend(
            self._stream(
                src["file"],
                source_label=label_backup(self.display_name),
                subtitles=subtitles,
            )
            for src in decrypted.get("source_bk") or []
            if isinstance(src, dict) and src.get("file")
        )
        return streams
