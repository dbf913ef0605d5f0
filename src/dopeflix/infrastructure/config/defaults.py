"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "dopeflix",
    "environment": "dev",
    "source": {
        "domain": "dopebox.to",
        "domains": ["dopebox.to", "dopebox.se", "sflix.to", "sflix.se"],
    },
    "http": {
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "retry_max_attempts": 3,
        "retry_backoff_base": 1.0,
        "retry_max_backoff": 30.0,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "preferences": {
        "quality": "1080p",
        "sub_language": "English",
        "popular_page": "movie",
        "latest_page": "Movies",
    },
    "resolver": {
        "max_concurrent_servers": 10,
        "resolve_timeout_seconds": 30.0,
    },
}
