"""Catalog entry binding URL patterns to extractor instances."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from resolvarr.domain.entities.streams import ExtractorCategory

if TYPE_CHECKING:
    from resolvarr.domain.ports.extractor import ExtractorPort


@dataclass(frozen=True)
class ExtractorDescriptor:
    """Static table entry for one host family.

    ``composite`` marks hosts whose page embeds several backend
    providers; such entries may fire alongside the first match.
    """

    id: str
    patterns: tuple[re.Pattern[str], ...]
    extractors: tuple[ExtractorPort, ...]
    category: ExtractorCategory = ExtractorCategory.VIDEO
    composite: bool = False

    @classmethod
    def build(
        cls,
        id: str,  # noqa: A002
        patterns: Iterable[str],
        *extractors: ExtractorPort,
        composite: bool = False,
    ) -> ExtractorDescriptor:
        return cls(
            id=id,
            patterns=tuple(re.compile(p) for p in patterns),
            extractors=tuple(extractors),
            composite=composite,
        )

    def matches(self, url: str) -> bool:
        return any(p.search(url) for p in self.patterns)
