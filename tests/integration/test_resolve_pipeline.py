"""Integration tests for the full resolve pipeline.

Config is loaded through the real loader, the composition root builds the
HTTP client and default catalog, and only the network is mocked.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from resolvarr.infrastructure.config.load import load_config
from resolvarr.interfaces.composition import (
    build_http_client,
    build_resolver,
    resolver_session,
)

pytestmark = pytest.mark.integration

_MP4UPLOAD = "https://www.mp4upload.com/embed-abc.html"
_PLAYER = 'player.src({ type: "video/mp4", src: "https://a1.mp4upload.com/d/x/video.mp4" });'


class TestResolverSession:
    @pytest.mark.asyncio()
    async def test_resolves_through_default_catalog(
        self, respx_mock: respx.MockRouter
    ) -> None:
        route = respx_mock.get(_MP4UPLOAD).respond(200, text=_PLAYER)
        config = load_config(cli_overrides={"http_user_agent": "IntegrationAgent/1.0"})

        async with resolver_session(config) as resolver:
            streams = await resolver.resolve(_MP4UPLOAD, referer="https://site.example/")

        assert [s.url for s in streams] == ["https://a1.mp4upload.com/d/x/video.mp4"]
        assert streams[0].source_label == "Mp4Upload"
        sent = route.calls.last.request
        assert sent.headers["User-Agent"] == "IntegrationAgent/1.0"
        assert sent.headers["Referer"] == "https://site.example/"

    @pytest.mark.asyncio()
    async def test_unsupported_host_makes_no_requests(
        self, respx_mock: respx.MockRouter
    ) -> None:
        async with resolver_session(load_config()) as resolver:
            streams = await resolver.resolve("https://unknown-host.example/v/1")
        assert streams == []
        assert respx_mock.calls.call_count == 0

    @pytest.mark.asyncio()
    async def test_disabled_extractor_is_skipped(
        self, respx_mock: respx.MockRouter
    ) -> None:
        route = respx_mock.get(_MP4UPLOAD).respond(200, text=_PLAYER)
        config = load_config(cli_overrides={"extractors_disabled": ["mp4upload"]})

        async with resolver_session(config) as resolver:
            assert "mp4upload" not in [d.id for d in resolver.registry.descriptors]
            streams = await resolver.resolve(_MP4UPLOAD)

        assert streams == []
        assert not route.called

    @pytest.mark.asyncio()
    async def test_host_failure_is_contained(self, respx_mock: respx.MockRouter) -> None:
        respx_mock.get(_MP4UPLOAD).mock(side_effect=httpx.ConnectError("refused"))
        async with resolver_session(load_config()) as resolver:
            assert await resolver.resolve(_MP4UPLOAD) == []


class TestBuilders:
    @pytest.mark.asyncio()
    async def test_http_client_follows_config(self) -> None:
        config = load_config(
            cli_overrides={
                "http_timeout_seconds": 12.0,
                "http_follow_redirects": False,
                "http_user_agent": "UA/2",
            }
        )
        client = build_http_client(config)
        try:
            assert client.timeout.read == 12.0
            assert client.follow_redirects is False
            assert client.headers["User-Agent"] == "UA/2"
        finally:
            await client.aclose()

    @pytest.mark.asyncio()
    async def test_resolver_uses_full_catalog(self, http_client: httpx.AsyncClient) -> None:
        resolver = build_resolver(load_config(), http_client)
        try:
            assert len(resolver.registry) == 37
        finally:
            await http_client.aclose()
