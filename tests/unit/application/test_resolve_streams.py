"""Tests for ResolveStreamsUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import respx

from resolvarr.application.use_cases.resolve_streams import ResolveStreamsUseCase
from resolvarr.domain.entities.catalog import ExtractorDescriptor
from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors.catalog import build_default_catalog
from resolvarr.infrastructure.extractors.registry import ExtractorRegistry


def _extractor(name: str, *urls: str) -> MagicMock:
    extractor = MagicMock()
    extractor.name = name
    extractor.extract = AsyncMock(
        return_value=[RawStream(url=u, source_label=name) for u in urls]
    )
    return extractor


class TestResolveStreams:
    @pytest.mark.asyncio()
    async def test_no_match_returns_empty(self) -> None:
        uc = ResolveStreamsUseCase(ExtractorRegistry())
        assert await uc.resolve("https://unknown.example/e/1") == []

    @pytest.mark.asyncio()
    async def test_first_match_only(self) -> None:
        first = _extractor("First", "https://cdn.example/1.mp4")
        second = _extractor("Second", "https://cdn.example/2.mp4")
        registry = ExtractorRegistry(
            [
                ExtractorDescriptor.build("first", [r"host\."], first),
                ExtractorDescriptor.build("second", [r"host\."], second),
            ]
        )
        streams = await ResolveStreamsUseCase(registry).resolve("https://host.example/e/1")
        assert [s.url for s in streams] == ["https://cdn.example/1.mp4"]
        second.extract.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_composite_results_concatenated(self) -> None:
        plain = _extractor("Plain", "https://cdn.example/a.mp4")
        composite = _extractor("Composite", "https://cdn.example/b.m3u8")
        registry = ExtractorRegistry(
            [
                ExtractorDescriptor.build("plain", [r"embed\."], plain),
                ExtractorDescriptor.build("combo", [r"embed\."], composite, composite=True),
            ]
        )
        streams = await ResolveStreamsUseCase(registry).resolve("https://embed.example/1")
        assert [s.source_label for s in streams] == ["Plain", "Composite"]

    @pytest.mark.asyncio()
    async def test_multi_match_disabled(self) -> None:
        plain = _extractor("Plain", "https://cdn.example/a.mp4")
        composite = _extractor("Composite", "https://cdn.example/b.m3u8")
        registry = ExtractorRegistry(
            [
                ExtractorDescriptor.build("plain", [r"embed\."], plain),
                ExtractorDescriptor.build("combo", [r"embed\."], composite, composite=True),
            ]
        )
        uc = ResolveStreamsUseCase(registry, multi_match_composite=False)
        streams = await uc.resolve("https://embed.example/1")
        assert [s.source_label for s in streams] == ["Plain"]

    @pytest.mark.asyncio()
    async def test_raising_port_is_contained(self) -> None:
        broken = MagicMock()
        broken.name = "Broken"
        broken.extract = AsyncMock(side_effect=RuntimeError("boom"))
        healthy = _extractor("Healthy", "https://cdn.example/ok.mp4")
        registry = ExtractorRegistry(
            [ExtractorDescriptor.build("host", [r"host\."], broken, healthy)]
        )
        streams = await ResolveStreamsUseCase(registry).resolve("https://host.example/1")
        assert [s.url for s in streams] == ["https://cdn.example/ok.mp4"]

    @pytest.mark.asyncio()
    async def test_request_carries_referer_and_headers(self) -> None:
        extractor = _extractor("X")
        registry = ExtractorRegistry([ExtractorDescriptor.build("x", [r"x\."], extractor)])
        await ResolveStreamsUseCase(registry).resolve(
            "https://x.example/1",
            referer="https://site.example/",
            headers={"Cookie": "a=b"},
        )
        request = extractor.extract.await_args.args[0]
        assert isinstance(request, ExtractorRequest)
        assert request.referer == "https://site.example/"
        assert request.headers == {"Cookie": "a=b"}


class TestResolveWithDefaultCatalog:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_unreachable_host_yields_empty(self) -> None:
        url = "https://streamtape.com/e/abc"
        respx.get(url).mock(side_effect=httpx.ConnectError("unreachable"))
        async with httpx.AsyncClient() as client:
            uc = ResolveStreamsUseCase(ExtractorRegistry(build_default_catalog(client)))
            assert await uc.resolve(url) == []

    @respx.mock
    @pytest.mark.asyncio()
    async def test_speedostream_end_to_end(self) -> None:
        url = "https://speedostream.example/embed-abc.html"
        respx.get(url).respond(200, text='player.setup({file:"https://cdn.example/v.m3u8"})')
        async with httpx.AsyncClient() as client:
            uc = ResolveStreamsUseCase(ExtractorRegistry(build_default_catalog(client)))
            streams = await uc.resolve(url)
        assert len(streams) == 1
        assert streams[0].source_label == "SpeedoStream"
        assert streams[0].is_m3u8 is True
