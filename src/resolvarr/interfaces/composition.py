"""Composition root: wires config, HTTP client, catalog and use case."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import structlog

from resolvarr.application.use_cases import ResolveStreamsUseCase
from resolvarr.infrastructure.config import AppConfig
from resolvarr.infrastructure.extractors import (
    ExtractorRegistry,
    build_default_catalog,
)

log = structlog.get_logger(__name__)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )


def build_resolver(
    config: AppConfig,
    http_client: httpx.AsyncClient,
) -> ResolveStreamsUseCase:
    """Build the use case around an existing client (caller owns its lifetime)."""
    registry = ExtractorRegistry(
        build_default_catalog(
            http_client,
            timeout=config.http_timeout_seconds,
            user_agent=config.http_user_agent,
            megaup_keys_url=config.extractors.megaup_keys_url,
            disabled=config.extractors.disabled,
        )
    )
    log.info("extractor_registry_initialized", count=len(registry))
    return ResolveStreamsUseCase(
        registry,
        multi_match_composite=config.extractors.multi_match_composite,
    )


@asynccontextmanager
async def resolver_session(config: AppConfig) -> AsyncIterator[ResolveStreamsUseCase]:
    """Open the shared HTTP client, yield a ready resolver, close the client."""
    http_client = build_http_client(config)
    log.debug("http_client_initialized")
    try:
        yield build_resolver(config, http_client)
    finally:
        await http_client.aclose()
        log.debug("http_client_closed")
