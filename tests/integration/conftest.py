"""Shared fixtures for integration tests.

These tests wire real components together (config loader, composition
root, extractor catalog) with HTTP mocked via respx.
"""

from __future__ import annotations

import os

import httpx
import pytest
import respx


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop RESOLVARR_* variables inherited from the developer shell."""
    for name in list(os.environ):
        if name.upper().startswith("RESOLVARR_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def http_client() -> httpx.AsyncClient:
    """Real httpx.AsyncClient for use with respx mocking."""
    return httpx.AsyncClient()


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
