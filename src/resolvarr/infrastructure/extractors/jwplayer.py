"""JWPlayer WordPress-plugin extractor (s3taku and similar).

The player page exposes its AJAX parameters only as fragments of a
packed dictionary: the video id pieces between ``|ajaxUrl|`` and
``|video_id`` and the nonce before ``|playerNonce``.  The host answers
intermittently, so the page/AJAX round is repeated a bounded number of
times until ``sources`` come back.
"""

from __future__ import annotations

import re
from typing import Any

import structlog

from resolvarr.domain.entities.streams import (
    ExtractorRequest,
    RawStream,
    SubtitleTrack,
)
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import origin_of

log = structlog.get_logger(__name__)

_MAX_ATTEMPTS = 10
_VIDEO_ID_RE = re.compile(r"\|ajaxUrl\|(.*?)\|video_id")
_NONCE_RE = re.compile(r"\|autoPlay\|(.*?)\|playerNonce")


def parse_player_params(html: str) -> tuple[str, str] | None:
    """Return ``(video_id, nonce)`` from the packed dictionary, if present."""
    id_match = _VIDEO_ID_RE.search(html)
    nonce_match = _NONCE_RE.search(html)
    if not id_match or not nonce_match:
        return None
    parts = sorted(id_match.group(1).split("|"), reverse=True)
    return "+".join(parts) + "=", nonce_match.group(1)


class JWPlayerExtractor(BaseExtractor):
    key = "jwplayer"
    display_name = "JWPlayer"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        headers = self._headers(
            request,
            referer=request.url,
            extra={"Content-Type": "application/x-www-form-urlencoded"},
        )
        ajax_url = f"{origin_of(request.url)}/wp-admin/admin-ajax.php"

        data: Any = None
        for attempt in range(1, _MAX_ATTEMPTS + 1):
            html = await self._get_text(request.url, headers=headers)
            params = parse_player_params(html or "")
            if params is None:
                log.debug("jwplayer_params_missing", attempt=attempt, url=request.url)
                continue
            video_id, nonce = params
            resp = await self._request(
                "POST",
                ajax_url,
                headers=headers,
                data={
                    "action": "get_player_data",
                    "video_id": video_id,
                    "player_nonce": nonce,
                },
            )
            data = resp.json() if resp is not None else None
            if isinstance(data, dict) and data.get("sources"):
                break
            log.debug("jwplayer_sources_missing", attempt=attempt, url=request.url)
        else:
            log.warning("jwplayer_attempts_exhausted", url=request.url)
            return []

        subtitles = [
            SubtitleTrack.from_url(sub["url"], sub.get("lang"), sub.get("lang"))
            for sub in data.get("subtitles") or []
            if isinstance(sub, dict) and sub.get("url")
        ]
        stream_headers = self._headers(referer=request.url.split("watch?")[0])
        return [
            self._stream(
                src["file"],
                is_m3u8=src.get("type") == "hls",
                headers=stream_headers,
                subtitles=subtitles,
            )
            for src in data.get("sources") or []
            if isinstance(src, dict) and src.get("file")
        ]
