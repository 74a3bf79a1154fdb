from .extractor import ExtractorPort

__all__ = ["ExtractorPort"]
