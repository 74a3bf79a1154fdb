"""Shared plumbing for host-specific extractors.

:class:`BaseExtractor` owns the non-throwing contract: host modules
implement ``_extract()`` and may raise freely, ``extract()`` turns every
failure into a structured log record and an empty list.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

import httpx
import structlog

from resolvarr.domain.entities.streams import (
    ExtractorRequest,
    RawStream,
    SubtitleTrack,
)
from resolvarr.infrastructure.extractors._common import (
    DEFAULT_USER_AGENT,
    is_absolute_url,
)

log = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 15.0

_DECODE_ERRORS = (ValueError, KeyError, IndexError, TypeError, UnicodeDecodeError)


class BaseExtractor:
    """Base for extractors that talk HTTP through an injected client.

    Subclasses set ``key`` (log/catalog id) and ``display_name`` (the
    ``source_label`` of emitted streams) and implement ``_extract()``.
    """

    key: str = ""
    display_name: str = ""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._http = http_client
        self._timeout = timeout
        self._user_agent = user_agent

    @property
    def name(self) -> str:
        return self.display_name

    async def extract(self, request: ExtractorRequest) -> list[RawStream]:
        """Run the host pipeline; never raises except on cancellation."""
        url = request.url
        try:
            streams = await self._extract(request)
        except httpx.TimeoutException:
            log.warning("extractor_timeout", extractor=self.key, url=url)
            return []
        except httpx.HTTPError as exc:
            log.warning(
                "extractor_http_error",
                extractor=self.key,
                url=url,
                error=str(exc),
            )
            return []
        except _DECODE_ERRORS as exc:
            log.warning(
                "extractor_decode_failed",
                extractor=self.key,
                url=url,
                error=repr(exc),
            )
            return []
        except Exception:
            log.exception("extractor_error", extractor=self.key, url=url)
            return []

        valid = [s for s in streams if is_absolute_url(s.url)]
        if len(valid) != len(streams):
            log.debug(
                "extractor_dropped_invalid_urls",
                extractor=self.key,
                dropped=len(streams) - len(valid),
            )
        if not valid:
            log.info("extractor_no_streams", extractor=self.key, url=url)
        else:
            log.debug("extractor_streams", extractor=self.key, count=len(valid))
        return valid

    async def _extract(self, request: ExtractorRequest) -> list[RawStream]:
        raise NotImplementedError

    # -- stream construction ------------------------------------------------

    def _stream(
        self,
        url: str,
        *,
        is_m3u8: bool | None = None,
        quality: str | None = None,
        source_label: str | None = None,
        headers: Mapping[str, str] | None = None,
        subtitles: Iterable[SubtitleTrack] = (),
    ) -> RawStream:
        """Build a stream labelled with this extractor's display name."""
        return RawStream(
            url=url,
            is_m3u8=".m3u8" in url if is_m3u8 is None else is_m3u8,
            quality=quality or "auto",
            source_label=source_label or self.display_name,
            headers=dict(headers or {}),
            subtitles=tuple(subtitles),
        )

    # -- HTTP helpers -------------------------------------------------------

    def _headers(
        self,
        request: ExtractorRequest | None = None,
        *,
        referer: str | None = None,
        extra: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        """Default UA, then caller headers, then referer, then *extra*."""
        headers = {"User-Agent": self._user_agent}
        if request is not None:
            headers.update(request.headers)
            if request.referer:
                headers["Referer"] = request.referer
        if referer:
            headers["Referer"] = referer
        if extra:
            headers.update(extra)
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
        json_body: Any = None,
        follow_redirects: bool = True,
    ) -> httpx.Response | None:
        """Send a request; non-success statuses are logged and yield ``None``.

        With ``follow_redirects=False`` a 3xx answer counts as success.
        """
        resp = await self._http.request(
            method,
            url,
            headers=dict(headers) if headers else self._headers(),
            params=params,
            data=data,
            json=json_body,
            follow_redirects=follow_redirects,
            timeout=self._timeout,
        )
        ok = resp.is_success or (not follow_redirects and resp.is_redirect)
        if not ok:
            log.warning(
                "extractor_http_status",
                extractor=self.key,
                status=resp.status_code,
                url=url,
            )
            return None
        return resp

    async def _get_text(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> str | None:
        resp = await self._request("GET", url, headers=headers, params=params)
        return resp.text if resp is not None else None

    async def _get_json(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """GET and decode JSON; unparseable bodies are logged and yield ``None``."""
        resp = await self._request("GET", url, headers=headers, params=params)
        if resp is None:
            return None
        try:
            return resp.json()
        except json.JSONDecodeError:
            log.warning("extractor_invalid_json", extractor=self.key, url=url)
            return None
