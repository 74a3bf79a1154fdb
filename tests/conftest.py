"""Shared test fixtures for the resolvarr test suite."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def raw_stream() -> RawStream:
    """Minimal valid RawStream."""
    return RawStream(
        url="https://cdn.example.com/hls/master.m3u8",
        is_m3u8=True,
        source_label="Example",
        headers={"Referer": "https://example.com/"},
    )


# ---------------------------------------------------------------------------
# Fake ports
# ---------------------------------------------------------------------------


@dataclass
class FakeExtractor:
    """Extractor port returning canned streams and recording calls."""

    name: str = "Fake"
    streams: list[RawStream] = field(default_factory=list)
    calls: list[ExtractorRequest] = field(default_factory=list)

    async def extract(self, request: ExtractorRequest) -> list[RawStream]:
        self.calls.append(request)
        return list(self.streams)


@pytest.fixture()
def fake_extractor(raw_stream: RawStream) -> FakeExtractor:
    return FakeExtractor(streams=[raw_stream])
