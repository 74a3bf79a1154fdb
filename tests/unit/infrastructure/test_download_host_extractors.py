"""Tests for download-style hosts: Send, Photojin, Rubystream, Uperbox,
SpeedoStream, Saicord and Bilibili."""

from __future__ import annotations

import base64
import json
from urllib.parse import parse_qs

import httpx
import pytest
import respx

from resolvarr.domain.entities.streams import ExtractorRequest
from resolvarr.infrastructure.extractors._unpacker import pack_p_a_c_k
from resolvarr.infrastructure.extractors.bilibili import (
    BilibiliExtractor,
    extract_episode_id,
)
from resolvarr.infrastructure.extractors.photojin import PhotojinExtractor
from resolvarr.infrastructure.extractors.rubystream import RubystreamExtractor
from resolvarr.infrastructure.extractors.saicord import (
    REFERER as SAICORD_REFERER,
    SaicordExtractor,
    find_atob_payload,
)
from resolvarr.infrastructure.extractors.send import SendExtractor
from resolvarr.infrastructure.extractors.speedostream import SpeedoStreamExtractor
from resolvarr.infrastructure.extractors.uperbox import UperboxExtractor

_F1_FORM = """\
<form name="F1" id="F1" method="POST">
  <input type="hidden" name="op" value="download2">
  <input type="hidden" name="id" value="abc123">
  <input type="hidden" name="rand" value="">
</form>
"""


class TestSendExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_location_header(self) -> None:
        url = "https://send.cm/abc123"
        respx.get(url).respond(200, text=_F1_FORM)
        post = respx.post("https://send.cm/").respond(
            302, headers={"Location": "https://s1.send.cm/d/abc123/video.mp4"}
        )
        async with httpx.AsyncClient() as client:
            streams = await SendExtractor(client).extract(ExtractorRequest.for_url(url))
        assert parse_qs(post.calls.last.request.content.decode())["op"] == ["download2"]
        assert [s.url for s in streams] == ["https://s1.send.cm/d/abc123/video.mp4"]

    @respx.mock
    @pytest.mark.asyncio()
    async def test_no_redirect(self) -> None:
        url = "https://send.cm/abc123"
        respx.get(url).respond(200, text=_F1_FORM)
        respx.post("https://send.cm/").respond(200, text="<html>captcha</html>")
        async with httpx.AsyncClient() as client:
            streams = await SendExtractor(client).extract(ExtractorRequest.for_url(url))
        assert streams == []


class TestPhotojinExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_generate_download(self) -> None:
        url = "https://photojin.example/abc123"
        respx.get(url).respond(
            200,
            text='<button id="generate_url" data-uid="u1" data-token="t1">Go</button>',
        )
        action = respx.post("https://photojin.example/action").respond(
            200, json={"download_url": "https://dl.photojin.example/f/abc.mp4"}
        )
        async with httpx.AsyncClient() as client:
            streams = await PhotojinExtractor(client).extract(ExtractorRequest.for_url(url))
        assert json.loads(action.calls.last.request.content) == {
            "type": "DOWNLOAD_GENERATE",
            "payload": {"uid": "u1", "access_token": "t1"},
        }
        assert [s.url for s in streams] == ["https://dl.photojin.example/f/abc.mp4"]

    @respx.mock
    @pytest.mark.asyncio()
    async def test_missing_token(self) -> None:
        url = "https://photojin.example/abc123"
        respx.get(url).respond(200, text='<button id="generate_url" data-uid="u1"></button>')
        async with httpx.AsyncClient() as client:
            streams = await PhotojinExtractor(client).extract(ExtractorRequest.for_url(url))
        assert streams == []


class TestRubystreamExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_post_and_unpack(self) -> None:
        url = "https://rubystm.com/abc123"
        respx.get(url).respond(200, text=_F1_FORM)
        packed = pack_p_a_c_k('jwplayer("v").setup({file:"https://cdn.example/hls/abc/master.m3u8"});')
        dl = respx.post("https://rubystm.com/dl").respond(200, text=f"<script>{packed}</script>")
        async with httpx.AsyncClient() as client:
            streams = await RubystreamExtractor(client).extract(ExtractorRequest.for_url(url))
        form = parse_qs(dl.calls.last.request.content.decode())
        assert form["file_code"] == ["abc123"]
        assert form["referer"] == ["https://rubystm.com"]
        assert [s.url for s in streams] == ["https://cdn.example/hls/abc/master.m3u8"]
        assert streams[0].is_m3u8 is True


class TestUperboxExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_two_hops(self) -> None:
        url = "https://uperbox.example/files/abc123"
        respx.get(url).respond(
            200, text='<div class="main-container"><a class="btn" href="next/abc">Next</a></div>'
        )
        respx.get("https://uperbox.example/files/next/abc").respond(
            200,
            text='<a href="/help">Help</a><a href="/dl/abc/video.mp4">Start Download</a>',
        )
        async with httpx.AsyncClient() as client:
            streams = await UperboxExtractor(client).extract(ExtractorRequest.for_url(url))
        assert [s.url for s in streams] == ["https://uperbox.example/dl/abc/video.mp4"]


class TestSpeedoStreamExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_file_field(self) -> None:
        url = "https://speedostream.example/embed-abc.html"
        route = respx.get(url).respond(
            200, text='<script>player.setup({file:"https://cdn.example/v/abc.m3u8"});</script>'
        )
        async with httpx.AsyncClient() as client:
            streams = await SpeedoStreamExtractor(client).extract(ExtractorRequest.for_url(url))
        assert route.calls.last.request.headers["Referer"] == "https://speedostream.example/"
        assert [s.url for s in streams] == ["https://cdn.example/v/abc.m3u8"]


class TestSaicordExtractor:
    def test_prefers_player_scripts(self) -> None:
        player = base64.b64encode(b'file:"https://cdn.example/player.mp4"').decode()
        ad = base64.b64encode(b'file:"https://ads.example/ad.mp4"').decode()
        html = (
            f'<script>atob("{ad}")</script>'
            f'<div class="player-iframe"><script>eval(atob("{player}"))</script></div>'
        )
        assert find_atob_payload(html) == player

    @respx.mock
    @pytest.mark.asyncio()
    async def test_decodes_atob(self) -> None:
        url = "https://saicord.com/e/abc"
        payload = base64.b64encode(b"jwplayer().setup({file:'https://cdn.example/s.m3u8'})")
        route = respx.get(url).respond(
            200, text=f'<script>var c = atob("{payload.decode()}");</script>'
        )
        async with httpx.AsyncClient() as client:
            streams = await SaicordExtractor(client).extract(ExtractorRequest.for_url(url))
        assert route.calls.last.request.headers["Referer"] == SAICORD_REFERER
        assert [s.url for s in streams] == ["https://cdn.example/s.m3u8"]


class TestBilibiliExtractor:
    def test_episode_id_patterns(self) -> None:
        assert extract_episode_id("https://www.bilibili.tv/en/play/1?episode_id=42") == "42"
        assert extract_episode_id("https://www.bilibili.tv/en/play/ep77") == "77"
        assert extract_episode_id("https://www.bilibili.tv/en/video/99/") == "99"

    @pytest.mark.asyncio()
    async def test_builds_api_url_without_requests(self) -> None:
        async with httpx.AsyncClient() as client:
            streams = await BilibiliExtractor(client).extract(
                ExtractorRequest.for_url("https://www.bilibili.tv/en/play/ep77")
            )
        assert [s.url for s in streams] == [
            "https://api.consumet.org/utils/bilibili/playurl?episode_id=77"
        ]
        assert streams[0].is_m3u8 is False
