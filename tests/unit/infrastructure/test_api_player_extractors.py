"""Tests for extractors that follow the page with a JSON/API call.

Covers Megacloud, PixFusion, VidCloud and Vcdnlare.
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from resolvarr.domain.entities.streams import ExtractorRequest
from resolvarr.infrastructure.extractors._unpacker import pack_p_a_c_k
from resolvarr.infrastructure.extractors.megacloud import (
    MegacloudExtractor,
    find_nonce,
    parse_tracks,
)
from resolvarr.infrastructure.extractors.pixfusion import (
    PixFusionExtractor,
    video_url_from_response,
)
from resolvarr.infrastructure.extractors.vcdnlare import VcdnlareExtractor
from resolvarr.infrastructure.extractors.vidcloud import VidCloudExtractor

_MASTER = (
    "#EXTM3U\n"
    "#EXT-X-STREAM-INF:BANDWIDTH=2000000,RESOLUTION=1920x1080\n1080/index.m3u8\n"
    "#EXT-X-STREAM-INF:BANDWIDTH=800000,RESOLUTION=854x480\n480/index.m3u8\n"
)


# ---------------------------------------------------------------------------
# Megacloud
# ---------------------------------------------------------------------------

_MC_URL = "https://megacloud.blog/embed-2/v3/e-1/AbC123?k=1"
_NONCE = "n" * 24 + "0" * 24
_MC_PAGE = (
    '<html><div id="megacloud-player" data-id="AbC123"></div>'
    f'<script>window._xy_ws = "{_NONCE}";</script></html>'
)


class TestMegacloudHelpers:
    def test_nonce_48(self) -> None:
        assert find_nonce(f'x = "{_NONCE}"') == _NONCE

    def test_nonce_three_parts(self) -> None:
        parts = ["a" * 16, "b" * 16, "c" * 16]
        html = f'k1="{parts[0]}"; k2="{parts[1]}"; k3="{parts[2]}";'
        assert find_nonce(html) == "".join(parts)

    def test_no_nonce(self) -> None:
        assert find_nonce("<html>short tokens only</html>") is None

    def test_parse_tracks_skips_thumbnails(self) -> None:
        tracks = parse_tracks(
            {
                "tracks": [
                    {"file": "https://mc.example/en.vtt", "label": "English", "kind": "captions"},
                    {"file": "https://mc.example/thumbs.vtt", "kind": "thumbnails"},
                    {"label": "no file"},
                ]
            }
        )
        assert [t.url for t in tracks] == ["https://mc.example/en.vtt"]
        assert tracks[0].name == "English"


class TestMegacloudExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_plain_sources(self) -> None:
        respx.get(host="megacloud.blog", path="/embed-2/v3/e-1/AbC123").respond(
            200, text=_MC_PAGE
        )
        api = respx.get(host="megacloud.blog", path="/embed-2/v3/e-1/getSources").respond(
            200,
            json={
                "sources": [{"file": "https://mc.example/hls/master.m3u8", "type": "hls"}],
                "tracks": [
                    {"file": "https://mc.example/en.vtt", "label": "English", "kind": "captions"}
                ],
            },
        )
        async with httpx.AsyncClient() as client:
            streams = await MegacloudExtractor(client).extract(
                ExtractorRequest.for_url(_MC_URL)
            )
        assert len(streams) == 1
        assert streams[0].url == "https://mc.example/hls/master.m3u8"
        assert streams[0].is_m3u8 is True
        assert [s.url for s in streams[0].subtitles] == ["https://mc.example/en.vtt"]
        params = api.calls.last.request.url.params
        assert params["id"] == "AbC123"
        assert params["_k"] == _NONCE

    @respx.mock
    @pytest.mark.asyncio()
    async def test_encrypted_sources_use_decoder(self) -> None:
        respx.get(host="megacloud.blog", path="/embed-2/v3/e-1/AbC123").respond(
            200, text=_MC_PAGE
        )
        respx.get(host="megacloud.blog", path="/embed-2/v3/e-1/getSources").respond(
            200, json={"sources": "U2FsdGVkX1+cipher", "tracks": []}
        )
        respx.get(host="raw.githubusercontent.com").respond(200, json={"mega": "s3cr3t"})
        decoder = respx.get(host="script.google.com").respond(
            200,
            text=json.dumps(
                {"sources": [{"file": "https://mc.example/dec.m3u8"}]}, separators=(",", ":")
            ).replace(
                "/", "\\/"
            ),
        )
        async with httpx.AsyncClient() as client:
            streams = await MegacloudExtractor(client).extract(
                ExtractorRequest.for_url(_MC_URL)
            )
        assert [s.url for s in streams] == ["https://mc.example/dec.m3u8"]
        params = decoder.calls.last.request.url.params
        assert params["secret"] == "s3cr3t"
        assert params["nonce"] == _NONCE
        assert params["encrypted_data"] == "U2FsdGVkX1+cipher"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_missing_player_element(self) -> None:
        respx.get(host="megacloud.blog").respond(200, text="<html></html>")
        async with httpx.AsyncClient() as client:
            streams = await MegacloudExtractor(client).extract(
                ExtractorRequest.for_url(_MC_URL)
            )
        assert streams == []


# ---------------------------------------------------------------------------
# PixFusion
# ---------------------------------------------------------------------------

_PX_URL = "https://pixfusion.in/video/abc"


def _px_page() -> str:
    player = pack_p_a_c_k('FirePlayer("vid42", {autoplay:false}, false);')
    return f"<html><script>{player}</script></html>"


class TestVideoUrlFromResponse:
    def test_video_source_first(self) -> None:
        data = {"videoSource": "https://a.example/v.m3u8", "securedLink": "https://b.example/v"}
        assert video_url_from_response("", data) == "https://a.example/v.m3u8"

    def test_secured_link_fallback(self) -> None:
        assert (
            video_url_from_response("", {"videoSource": "", "securedLink": "https://b.example/v"})
            == "https://b.example/v"
        )

    def test_plain_text_body(self) -> None:
        assert video_url_from_response(" https://c.example/v.mp4\n", None) == (
            "https://c.example/v.mp4"
        )

    def test_garbage(self) -> None:
        assert video_url_from_response("error", None) is None
        assert video_url_from_response("", {"other": 1}) is None


class TestPixFusionExtractor:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_fireplayer_id_exchanged(self) -> None:
        respx.get(_PX_URL).respond(200, text=_px_page())
        api = respx.post(host="pixfusion.in", path="/player/index.php").respond(
            200, json={"videoSource": "https://px.example/hls/v.m3u8"}
        )
        async with httpx.AsyncClient() as client:
            streams = await PixFusionExtractor(client).extract(
                ExtractorRequest.for_url(_PX_URL)
            )
        assert [s.url for s in streams] == ["https://px.example/hls/v.m3u8"]
        sent = api.calls.last.request
        assert sent.url.params["data"] == "vid42"
        assert sent.url.params["do"] == "getVideo"
        assert sent.headers["X-Requested-With"] == "XMLHttpRequest"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_no_fireplayer(self) -> None:
        respx.get(_PX_URL).respond(200, text="<html></html>")
        api = respx.post(host="pixfusion.in", path="/player/index.php")
        async with httpx.AsyncClient() as client:
            streams = await PixFusionExtractor(client).extract(
                ExtractorRequest.for_url(_PX_URL)
            )
        assert streams == []
        assert not api.called


# ---------------------------------------------------------------------------
# VidCloud
# ---------------------------------------------------------------------------


class TestVidCloudExtractor:
    _URL = "https://vidcloud.co/embed/abc"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_files_then_variants(self) -> None:
        respx.get(self._URL).respond(
            200,
            text=(
                'sources = [{file: "https://vc.example/hls/master.m3u8"},'
                '{file: "https://vc.example/v.mp4"}]'
            ),
        )
        respx.get("https://vc.example/hls/master.m3u8").respond(200, text=_MASTER)
        async with httpx.AsyncClient() as client:
            streams = await VidCloudExtractor(client).extract(
                ExtractorRequest.for_url(self._URL)
            )
        assert [s.url for s in streams] == [
            "https://vc.example/hls/master.m3u8",
            "https://vc.example/v.mp4",
            "https://vc.example/hls/1080/index.m3u8",
            "https://vc.example/hls/480/index.m3u8",
        ]
        assert [s.quality for s in streams] == ["auto", "auto", "1080p", "480p"]
        assert streams[0].headers["Referer"] == self._URL

    @respx.mock
    @pytest.mark.asyncio()
    async def test_no_files(self) -> None:
        respx.get(self._URL).respond(200, text="{}")
        async with httpx.AsyncClient() as client:
            streams = await VidCloudExtractor(client).extract(
                ExtractorRequest.for_url(self._URL)
            )
        assert streams == []


# ---------------------------------------------------------------------------
# Vcdnlare
# ---------------------------------------------------------------------------


class TestVcdnlareExtractor:
    _URL = "https://vcdnlare.com/v/abc"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_relative_source_resolved(self) -> None:
        respx.get(self._URL).respond(
            200,
            text='<video><source src="/files/abc.mp4" type="video/mp4"></video>',
        )
        async with httpx.AsyncClient() as client:
            streams = await VcdnlareExtractor(client).extract(
                ExtractorRequest.for_url(self._URL)
            )
        assert [s.url for s in streams] == ["https://vcdnlare.com/files/abc.mp4"]
        assert streams[0].source_label == "Vcdnlare"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_no_source(self) -> None:
        respx.get(self._URL).respond(200, text="<video></video>")
        async with httpx.AsyncClient() as client:
            streams = await VcdnlareExtractor(client).extract(
                ExtractorRequest.for_url(self._URL)
            )
        assert streams == []
