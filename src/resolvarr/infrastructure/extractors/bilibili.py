"""Bilibili extractor: maps an episode id onto the consumet play-url API.

No request is made here; the API URL itself is the stream.
"""

from __future__ import annotations

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import first_match

log = structlog.get_logger(__name__)

_PLAYURL_API = "https://api.consumet.org/utils/bilibili/playurl"


def extract_episode_id(url: str) -> str | None:
    found = first_match(url, r"episode_id=(\d+)", r"ep(\d+)")
    if found:
        return found
    last = url.rstrip("/").rsplit("/", 1)[-1]
    return last or None


class BilibiliExtractor(BaseExtractor):
    key = "bilibili"
    display_name = "Bilibili"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        episode_id = extract_episode_id(request.url)
        if not episode_id:
            log.warning("bilibili_no_episode_id", url=request.url)
            return []
        return [
            self._stream(
                f"{_PLAYURL_API}?episode_id={episode_id}",
                is_m3u8=False,
            )
        ]
