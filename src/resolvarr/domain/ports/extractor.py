"""Port for host-specific stream extraction strategies."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream


@runtime_checkable
class ExtractorPort(Protocol):
    """Resolves a hoster page URL to zero or more playable streams.

    Implementations handle site-specific extraction logic (script
    unpacking, payload decryption, API calls, etc.) and never raise:
    every failure is logged and surfaces as an empty list.
    """

    @property
    def name(self) -> str:
        """Display name of the host family (e.g. 'Voe', 'StreamTape')."""
        ...

    async def extract(self, request: ExtractorRequest) -> list[RawStream]:
        """Extract playable streams for *request*.

        Returns an empty list if nothing could be resolved.
        """
        ...
