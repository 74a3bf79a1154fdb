"""URL and pattern helpers shared by the extractors."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlparse

BACKUP_SUFFIX = " (Backup)"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/129.0.0.0 Safari/537.36"
)


def origin_of(url: str) -> str:
    """``scheme://host[:port]`` of *url*, or ``""`` if it has none."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme}://{parsed.netloc}"


def host_of(url: str) -> str:
    return urlparse(url).hostname or ""


def is_absolute_url(url: str | None) -> bool:
    if not url:
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def resolve_url(base: str, ref: str, *, path_relative: bool = False) -> str:
    """Make *ref* absolute relative to the page at *base*.

    - absolute refs are returned as-is
    - ``//host/...`` refs get the ``https:`` scheme
    - dot-relative refs (``./``, ``../``) and ``path_relative=True``
      resolve against the page path (RFC 3986)
    - everything else resolves against the origin of *base*
    """
    ref = ref.strip()
    if not ref or is_absolute_url(ref):
        return ref
    if ref.startswith("//"):
        return "https:" + ref
    if path_relative or ref.startswith(("./", "../")):
        return urljoin(base, ref)
    origin = origin_of(base)
    if not origin:
        return ref
    return urljoin(origin + "/", ref.lstrip("/"))


def first_match(
    text: str,
    *patterns: str | re.Pattern[str],
    flags: int = 0,
) -> str | None:
    """First non-empty group 1 of the patterns, tried in the given order."""
    for pattern in patterns:
        if isinstance(pattern, str):
            m = re.search(pattern, text, flags)
        else:
            m = pattern.search(text)
        if m and m.group(1):
            return m.group(1)
    return None


def label_backup(label: str | None) -> str:
    return f"{label or ''}{BACKUP_SUFFIX}"


def quality_from_label(label: object) -> str | None:
    """``"720p HD"`` -> ``"720p"``; non-strings and blanks yield ``None``."""
    if not isinstance(label, str) or not label.strip():
        return None
    return label.split()[0]


def looks_like_m3u8(url: str) -> bool:
    return ".m3u8" in url.lower()
