"""Host-specific stream extractors and the catalog that dispatches to them."""

from __future__ import annotations

from .catalog import build_default_catalog
from .registry import ExtractorRegistry

__all__ = ["ExtractorRegistry", "build_default_catalog"]
