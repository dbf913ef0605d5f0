"""HTTP access to the streaming site and its hosting servers."""

from __future__ import annotations

from .page_fetcher import HttpxPageFetcher, build_http_client
from .retry_transport import RetryTransport

__all__ = ["HttpxPageFetcher", "RetryTransport", "build_http_client"]
