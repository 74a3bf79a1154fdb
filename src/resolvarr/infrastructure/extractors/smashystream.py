"""SmashyStream extractor.

The embed page lists its players in a dropdown; each ``data-id`` is a
player endpoint.  Direct ``.m3u8`` entries are emitted as-is, the rest
are JSON endpoints answering with ``sourceUrls`` or ``file``.
"""

from __future__ import annotations

import httpx
import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.common.html_selectors import parse_html, select_items
from resolvarr.infrastructure.extractors._base import BaseExtractor
from resolvarr.infrastructure.extractors._common import resolve_url

log = structlog.get_logger(__name__)

_PLAYER_TYPES: tuple[tuple[str, str], ...] = (
    ("/ffix", "FFix"),
    ("/watchx", "WatchX"),
    ("/nflim", "NFlim"),
    ("/fx", "FX"),
    ("/cf", "CF"),
    ("eemovie", "EEMovie"),
)


def player_type(player_url: str) -> str:
    for marker, label in _PLAYER_TYPES:
        if marker in player_url:
            return label
    return "unknown"


class SmashyStreamExtractor(BaseExtractor):
    key = "smashystream"
    display_name = "SmashyStream"

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        html = await self._get_text(
            request.url, headers=self._headers(request, referer=request.url)
        )
        if html is None:
            return []

        player_urls = [
            resolve_url(request.url, str(el.get("data-id")))
            for el in select_items(parse_html(html), ".dropdown-menu a[data-id]")
            if el.get("data-id") and el.get("data-id") != "_default"
        ]
        if not player_urls:
            log.warning("smashystream_no_players", url=request.url)
            return []

        streams: list[RawStream] = []
        for player_url in player_urls:
            label = f"{self.display_name} ({player_type(player_url)})"
            if player_url.split("?", 1)[0].endswith(".m3u8"):
                streams.append(self._stream(player_url, source_label=label))
                continue
            try:
                stream_url = await self._player_source(player_url, request.url)
            except httpx.HTTPError as exc:
                log.warning(
                    "smashystream_player_failed",
                    player=player_url,
                    error=str(exc),
                )
                continue
            if stream_url:
                streams.append(
                    self._stream(
                        stream_url,
                        source_label=label,
                        headers={"Referer": request.url},
                    )
                )
        return streams

    async def _player_source(self, player_url: str, referer: str) -> str | None:
        data = await self._get_json(
            player_url,
            headers=self._headers(
                referer=referer,
                extra={"X-Requested-With": "XMLHttpRequest"},
            ),
        )
        if not isinstance(data, dict):
            return None
        sources = data.get("sourceUrls")
        if isinstance(sources, list) and sources and isinstance(sources[0], str):
            return sources[0]
        if isinstance(sources, str) and sources:
            return sources
        file_url = data.get("file")
        return file_url if isinstance(file_url, str) and file_url else None
