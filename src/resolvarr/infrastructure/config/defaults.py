"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

from resolvarr.infrastructure.extractors._common import DEFAULT_USER_AGENT
from resolvarr.infrastructure.extractors.megaup import DEFAULT_KEYS_URL

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "resolvarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": DEFAULT_USER_AGENT,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "extractors": {
        "disabled": [],
        "megaup_keys_url": DEFAULT_KEYS_URL,
        "multi_match_composite": True,
    },
}
