"""Ordered extractor table with first-match dispatch."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from resolvarr.domain.entities.catalog import ExtractorDescriptor
from resolvarr.domain.entities.streams import ExtractorCategory

log = structlog.get_logger(__name__)


class ExtractorRegistry:
    """Immutable, ordered set of :class:`ExtractorDescriptor` entries.

    Lookup scans the table in order and stops at the first descriptor
    whose patterns match.  With ``multi=True`` the remaining composite
    descriptors that also match are appended; two plain descriptors
    never fire for the same URL.
    """

    def __init__(self, descriptors: Iterable[ExtractorDescriptor] = ()) -> None:
        self._descriptors: tuple[ExtractorDescriptor, ...] = tuple(descriptors)
        ids = [d.id for d in self._descriptors]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate extractor ids: {sorted(ids)}")

    @property
    def descriptors(self) -> tuple[ExtractorDescriptor, ...]:
        return self._descriptors

    @property
    def supported_ids(self) -> list[str]:
        return [d.id for d in self._descriptors]

    def __len__(self) -> int:
        return len(self._descriptors)

    def find(self, descriptor_id: str) -> ExtractorDescriptor | None:
        return next((d for d in self._descriptors if d.id == descriptor_id), None)

    def with_descriptor(self, descriptor: ExtractorDescriptor) -> ExtractorRegistry:
        """Return a new registry with *descriptor* appended to the table."""
        return ExtractorRegistry((*self._descriptors, descriptor))

    def match(
        self,
        url: str,
        *,
        category: ExtractorCategory = ExtractorCategory.VIDEO,
        multi: bool = False,
    ) -> list[ExtractorDescriptor]:
        """Descriptors to run for *url*, in table order.

        Empty when nothing matches.  Pure and deterministic.
        """
        matched: list[ExtractorDescriptor] = []
        for descriptor in self._descriptors:
            if descriptor.category != category or not descriptor.matches(url):
                continue
            if not matched:
                matched.append(descriptor)
                if not multi:
                    break
            elif descriptor.composite:
                matched.append(descriptor)
        if matched:
            log.debug(
                "extractor_matched",
                url=url,
                ids=[d.id for d in matched],
            )
        return matched
