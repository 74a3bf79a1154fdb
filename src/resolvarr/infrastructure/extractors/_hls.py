"""HLS master playlist parsing and per-quality stream expansion."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from urllib.parse import urljoin

import httpx
import structlog

from resolvarr.domain.entities.streams import RawStream, SubtitleTrack

log = structlog.get_logger(__name__)

_STREAM_INF = "#EXT-X-STREAM-INF:"
_RESOLUTION_RE = re.compile(r"RESOLUTION=(\d+)x(\d+)", re.IGNORECASE)
_BANDWIDTH_RE = re.compile(r"(?<![-\w])BANDWIDTH=(\d+)", re.IGNORECASE)


@dataclass(frozen=True)
class HlsVariant:
    """One ``#EXT-X-STREAM-INF`` entry of a master playlist."""

    url: str
    quality: str
    bandwidth: int | None = None


def parse_master_playlist(body: str, base_url: str) -> list[HlsVariant]:
    """Parse variant records in body order.

    ``RESOLUTION=1280x720`` becomes quality ``"720p"``; entries without a
    resolution get ``"auto"``.  Variant URIs are resolved against
    *base_url* (the playlist location).
    """
    variants: list[HlsVariant] = []
    lines = [line.strip() for line in body.splitlines()]
    for i, line in enumerate(lines):
        if not line.startswith(_STREAM_INF):
            continue
        uri = next(
            (nxt for nxt in lines[i + 1 :] if nxt and not nxt.startswith("#")),
            None,
        )
        if uri is None:
            continue
        res = _RESOLUTION_RE.search(line)
        bw = _BANDWIDTH_RE.search(line)
        variants.append(
            HlsVariant(
                url=urljoin(base_url, uri),
                quality=f"{res.group(2)}p" if res else "auto",
                bandwidth=int(bw.group(1)) if bw else None,
            )
        )
    return variants


def variants_to_streams(
    variants: Iterable[HlsVariant],
    *,
    source_label: str | None,
    headers: Mapping[str, str] | None = None,
    subtitles: Iterable[SubtitleTrack] = (),
) -> list[RawStream]:
    subs = tuple(subtitles)
    return [
        RawStream(
            url=v.url,
            is_m3u8=True,
            quality=v.quality,
            source_label=source_label,
            headers=dict(headers or {}),
            subtitles=subs,
        )
        for v in variants
    ]


async def expand_variants(
    http: httpx.AsyncClient,
    master_url: str,
    *,
    source_label: str | None,
    headers: Mapping[str, str] | None = None,
    subtitles: Iterable[SubtitleTrack] = (),
    include_master: bool = False,
    fallback_to_master: bool = False,
    require_bandwidth: bool = False,
    base_url: str | None = None,
    timeout: float = 15.0,
) -> list[RawStream]:
    """Fetch *master_url* and emit one stream per variant.

    With ``include_master`` the master itself is emitted first with
    quality ``"auto"``; with ``fallback_to_master`` it is emitted only
    when no variant could be found.  Fetch problems are logged, never
    raised.
    """
    subs = tuple(subtitles)
    master = RawStream(
        url=master_url,
        is_m3u8=True,
        source_label=source_label,
        headers=dict(headers or {}),
        subtitles=subs,
    )
    prefix = [master] if include_master else []
    fallback = [master] if include_master or fallback_to_master else []

    try:
        resp = await http.get(
            master_url,
            headers=dict(headers or {}),
            follow_redirects=True,
            timeout=timeout,
        )
    except httpx.HTTPError as exc:
        log.warning("hls_master_fetch_failed", url=master_url, error=str(exc))
        return fallback
    if not resp.is_success:
        log.warning("hls_master_http_error", status=resp.status_code, url=master_url)
        return fallback

    variants = parse_master_playlist(resp.text, base_url or master_url)
    if require_bandwidth:
        variants = [v for v in variants if v.bandwidth is not None]
    log.debug("hls_variants_parsed", url=master_url, count=len(variants))
    if not variants:
        return fallback

    return prefix + variants_to_streams(
        variants,
        source_label=source_label,
        headers=headers,
        subtitles=subs,
    )
