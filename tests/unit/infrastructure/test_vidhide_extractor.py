"""Tests for VidHideExtractor and KwikExtractor (packed HLS hosts)."""

from __future__ import annotations

import httpx
import pytest
import respx

from resolvarr.domain.entities.streams import ExtractorRequest
from resolvarr.infrastructure.extractors._unpacker import pack_p_a_c_k
from resolvarr.infrastructure.extractors.kwik import KwikExtractor
from resolvarr.infrastructure.extractors.vidhide import VidHideExtractor

_VIDHIDE = "https://filelions.to/v/abc123"
_KWIK = "https://kwik.si/e/abc123"


class TestVidHideExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_hls2_preferred(self) -> None:
        packed = pack_p_a_c_k(
            'var links={"hls4":"/stream/abc/master.m3u8","hls2":"https://cdn.example.com/'
            'hls2/abc/master.m3u8?t=1"};jwplayer("v").setup({file:links.hls4||links.hls2});'
        )
        respx.get(_VIDHIDE).respond(200, text=f"<script>{packed}</script>")
        async with httpx.AsyncClient() as client:
            streams = await VidHideExtractor(client).extract(ExtractorRequest.for_url(_VIDHIDE))
        assert [s.url for s in streams] == ["https://cdn.example.com/hls2/abc/master.m3u8?t=1"]
        assert streams[0].is_m3u8 is True
        assert streams[0].headers == {"Referer": _VIDHIDE}

    @respx.mock
    @pytest.mark.asyncio()
    async def test_relative_hls4(self) -> None:
        packed = pack_p_a_c_k('var links={"hls4":"\\/stream\\/abc\\/master.m3u8"};')
        respx.get(_VIDHIDE).respond(200, text=f"<script>{packed}</script>")
        async with httpx.AsyncClient() as client:
            streams = await VidHideExtractor(client).extract(ExtractorRequest.for_url(_VIDHIDE))
        assert [s.url for s in streams] == ["https://filelions.to/stream/abc/master.m3u8"]

    @respx.mock
    @pytest.mark.asyncio()
    async def test_nothing_found(self) -> None:
        respx.get(_VIDHIDE).respond(200, text="<html>gone</html>")
        async with httpx.AsyncClient() as client:
            streams = await VidHideExtractor(client).extract(ExtractorRequest.for_url(_VIDHIDE))
        assert streams == []


class TestKwikExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_m3u8_from_packed_script(self) -> None:
        packed = pack_p_a_c_k(
            "const source='https://na-01.files.example/stream/01/abc/uwu.m3u8';"
            "const player=new Plyr('#player');"
        )
        route = respx.get(_KWIK).respond(200, text=f"<script>{packed}</script>")
        async with httpx.AsyncClient() as client:
            streams = await KwikExtractor(client).extract(ExtractorRequest.for_url(_KWIK))
        assert route.calls.last.request.headers["Referer"] == "https://animepahe.ru/"
        assert [s.url for s in streams] == ["https://na-01.files.example/stream/01/abc/uwu.m3u8"]
        assert streams[0].is_m3u8 is True
        assert streams[0].headers == {"Referer": _KWIK}
