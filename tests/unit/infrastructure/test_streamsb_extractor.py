"""Tests for StreamSbExtractor."""

from __future__ import annotations

import httpx
import pytest
import respx

from resolvarr.domain.entities.streams import ExtractorRequest
from resolvarr.infrastructure.extractors.streamsb import (
    StreamSbExtractor,
    _extract_id,
    build_payload,
)

_EMBED = "https://streamsb.net/e/abc123.html"
_MASTER = "https://cdn.streamsb.example/hls/abc123/master.m3u8"


class TestPayload:
    def test_extract_id(self) -> None:
        assert _extract_id(_EMBED) == "abc123"
        assert _extract_id("https://streamsb.net/d/abc123") is None

    def test_id_is_hex_encoded(self) -> None:
        payload = build_payload("abc123")
        assert payload.startswith("566d337678566f743674494a7c7c616263313233")
        assert payload.endswith("73747265616d7362")


class TestStreamSbExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_variants_then_master(self) -> None:
        api = respx.get(
            f"https://streamsss.net/sources50/{build_payload('abc123')}"
        ).respond(200, json={"stream_data": {"file": _MASTER, "title": "x"}, "status_code": 200})
        respx.get(_MASTER).respond(
            200,
            text="#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=1,RESOLUTION=1280x720\n720.m3u8\n",
        )
        async with httpx.AsyncClient() as client:
            streams = await StreamSbExtractor(client).extract(ExtractorRequest.for_url(_EMBED))

        assert api.calls.last.request.headers["watchsb"] == "sbstream"
        assert [s.quality for s in streams] == ["720p", "auto"]
        assert streams[-1].url == _MASTER
        assert streams[0].headers["Referer"] == "https://streamsb.net"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_missing_stream_data(self) -> None:
        respx.get(f"https://streamsss.net/sources50/{build_payload('abc123')}").respond(
            200, json={"status_code": 404}
        )
        async with httpx.AsyncClient() as client:
            streams = await StreamSbExtractor(client).extract(ExtractorRequest.for_url(_EMBED))
        assert streams == []
