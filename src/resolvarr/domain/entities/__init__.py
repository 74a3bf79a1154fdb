from .streams import (
    DEFAULT_QUALITY,
    ExtractorCategory,
    ExtractorRequest,
    RawStream,
    SubtitleTrack,
    detect_subtitle_mime_type,
)
from .catalog import ExtractorDescriptor

__all__ = [
    "DEFAULT_QUALITY",
    "ExtractorCategory",
    "ExtractorDescriptor",
    "ExtractorRequest",
    "RawStream",
    "SubtitleTrack",
    "detect_subtitle_mime_type",
]
