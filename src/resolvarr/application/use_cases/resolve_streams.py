"""Resolve a video host page URL into playable streams."""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from resolvarr.domain.entities.streams import ExtractorRequest, RawStream
from resolvarr.infrastructure.extractors.registry import ExtractorRegistry

log = structlog.get_logger(__name__)


class ResolveStreamsUseCase:
    """Dispatches a URL to the matching extractor(s) and collects their streams.

    Flow:
        1. Match the URL against the ordered catalog (first match wins)
        2. Add further composite matches when multi-match is enabled
        3. Run every extractor of the selected descriptors in order
        4. Concatenate results; failures surface only as log records
    """

    def __init__(
        self,
        registry: ExtractorRegistry,
        *,
        multi_match_composite: bool = True,
    ) -> None:
        self._registry = registry
        self._multi = multi_match_composite

    @property
    def registry(self) -> ExtractorRegistry:
        return self._registry

    async def resolve(
        self,
        url: str,
        *,
        referer: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> list[RawStream]:
        """Resolve *url*; an unsupported host yields an empty list."""
        return await self.execute(
            ExtractorRequest.for_url(url, referer=referer, headers=headers)
        )

    async def execute(self, request: ExtractorRequest) -> list[RawStream]:
        descriptors = self._registry.match(
            request.url, category=request.category, multi=self._multi
        )
        if not descriptors:
            log.info("extractor_no_match", url=request.url)
            return []

        streams: list[RawStream] = []
        for descriptor in descriptors:
            for extractor in descriptor.extractors:
                try:
                    found = await extractor.extract(request)
                except Exception:
                    # Third-party ports may break the no-raise contract.
                    log.exception(
                        "extractor_contract_violation",
                        descriptor=descriptor.id,
                        extractor=extractor.name,
                        url=request.url,
                    )
                    continue
                streams.extend(found)

        log.info(
            "streams_resolved",
            url=request.url,
            descriptors=[d.id for d in descriptors],
            count=len(streams),
        )
        return streams
