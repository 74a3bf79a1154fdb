"""MegaUp extractor (megaup / animekai players).

The ``/media/`` endpoint returns an obfuscated ``result`` string.  It is
URL-safe base64 whose characters index into a per-position key table;
the key table itself is published remotely and fetched once per
extractor instance.
"""

from __future__ import annotations

import asyncio
import json
import re
from typing import Any
from urllib.parse import unquote

import httpx
import structlog

from resolvarr.domain.entities.streams import (
    ExtractorRequest,
    RawStream,
    SubtitleTrack,
)
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._codecs import b64_to_text

log = structlog.get_logger(__name__)

DEFAULT_KEYS_URL = (
    "https://raw.githubusercontent.com/amarullz/kaicodex/main/generated/keys.json"
)

_EMBED_PATH_RE = re.compile(r"/(?:e|e2)/")


def decode_media_result(encoded: str, keys: list[str]) -> str:
    """Reverse the key-table substitution of a ``/media/`` result."""
    decoded = b64_to_text(encoded.replace("_", "/").replace("-", "+"))
    out: list[str] = []
    for i, ch in enumerate(decoded):
        code = ord(ch)
        if code < len(keys):
            key = keys[code]
            out.append(key[i % len(key)])
    return unquote("".join(out))


class MegaUpExtractor(BaseExtractor):
    key = "megaup"
    display_name = "MegaUp"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        keys_url: str = DEFAULT_KEYS_URL,
        **kwargs: Any,
    ) -> None:
        super().__init__(http_client, **kwargs)
        self._keys_url = keys_url
        self._mega_keys: list[str] | None = None
        self._keys_lock = asyncio.Lock()

    async def _ensure_keys(self) -> list[str] | None:
        """Load the key table once; concurrent first calls share one fetch."""
        if self._mega_keys is not None:
            return self._mega_keys
        async with self._keys_lock:
            if self._mega_keys is None:
                data = await self._get_json(self._keys_url)
                mega = data.get("mega") if isinstance(data, dict) else None
                if not isinstance(mega, list) or not mega:
                    log.warning("megaup_keys_unavailable", url=self._keys_url)
                    return None
                self._mega_keys = [b64_to_text(str(k)) for k in mega]
                log.info("megaup_keys_loaded", count=len(self._mega_keys))
        return self._mega_keys

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        keys = await self._ensure_keys()
        if not keys:
            return []

        media_url = _EMBED_PATH_RE.sub("/media/", request.url, count=1)
        data = await self._get_json(
            media_url, headers=self._headers(request, referer=request.url)
        )
        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, str) or not result:
            log.warning("megaup_no_result", url=media_url)
            return []

        payload = json.loads(decode_media_result(result, keys).replace("\\", ""))
        subtitles = [
            SubtitleTrack.from_url(t["file"], t.get("label"), t.get("label"))
            for t in payload.get("tracks") or []
            if isinstance(t, dict) and t.get("file") and t.get("kind") != "thumbnails"
        ]
        return [
            self._stream(
                src["file"],
                is_m3u8="m3u8" in src["file"],
                subtitles=subtitles,
            )
            for src in payload.get("sources") or []
            if isinstance(src, dict) and src.get("file")
        ]
