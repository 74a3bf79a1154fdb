"""Domain entities for stream extraction.

Pure value objects without I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

DEFAULT_QUALITY = "auto"

_SUBTITLE_MIME_TYPES: dict[str, str] = {
    "vtt": "text/vtt",
    "srt": "text/srt",
    "sub": "text/sub",
    "sbv": "text/sbv",
    "smi": "text/smi",
    "ssa": "text/ssa",
    "ass": "text/ass",
}


def detect_subtitle_mime_type(url: str) -> str | None:
    """Guess a subtitle MIME type from the URL's file extension.

    Query strings and fragments are ignored.  Returns ``None`` for
    unknown extensions.
    """
    path = url.split("#", 1)[0].split("?", 1)[0]
    extension = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    return _SUBTITLE_MIME_TYPES.get(extension)


class ExtractorCategory(str, Enum):
    """Kind of media an extractor produces."""

    VIDEO = "video"
    AUDIO = "audio"


@dataclass(frozen=True)
class SubtitleTrack:
    """External subtitle file attached to a stream."""

    url: str
    name: str | None = None
    language: str | None = None
    mime_type: str | None = None

    @classmethod
    def from_url(
        cls,
        url: str,
        name: str | None = None,
        language: str | None = None,
    ) -> SubtitleTrack:
        return cls(
            url=url,
            name=name,
            language=language,
            mime_type=detect_subtitle_mime_type(url),
        )


@dataclass(frozen=True)
class RawStream:
    """A resolved, directly fetchable media URL plus playback metadata.

    ``is_m3u8`` is always set by the producing extractor.  Per-quality
    variants are derived with :meth:`copy_with`, never by mutation.
    """

    url: str
    is_m3u8: bool = False
    file_type: str | None = None
    quality: str | None = DEFAULT_QUALITY
    source_label: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    subtitles: tuple[SubtitleTrack, ...] = ()

    def copy_with(self, **changes: Any) -> RawStream:
        if "subtitles" in changes:
            changes["subtitles"] = tuple(changes["subtitles"])
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "url": self.url,
            "is_m3u8": self.is_m3u8,
            "file_type": self.file_type,
            "quality": self.quality,
            "source_label": self.source_label,
            "headers": dict(self.headers),
            "subtitles": [
                {
                    "url": sub.url,
                    "name": sub.name,
                    "language": sub.language,
                    "mime_type": sub.mime_type,
                }
                for sub in self.subtitles
            ],
        }


@dataclass(frozen=True)
class ExtractorRequest:
    """Input for a single resolution attempt."""

    url: str
    category: ExtractorCategory = ExtractorCategory.VIDEO
    referer: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    media_title: str | None = None
    server_name: str | None = None

    @classmethod
    def for_url(
        cls,
        url: str,
        referer: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ExtractorRequest:
        return cls(url=url, referer=referer, headers=dict(headers or {}))

    def copy_with(self, **changes: Any) -> ExtractorRequest:
        return replace(self, **changes)
