"""httpx-backed page fetcher.

Translates httpx failures into the domain's fetch errors so the rest of
the code never handles transport exceptions directly.
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx
import structlog

from dopeflix.domain.exceptions import FetchConnectionError, HttpStatusError
from dopeflix.domain.ports.page_fetcher import PageResponse

from .retry_transport import RetryTransport

log = structlog.get_logger(__name__)


def build_http_client(
    *,
    timeout: float,
    user_agent: str,
    follow_redirects: bool = True,
    max_retries: int = 3,
    backoff_base: float = 1.0,
    max_backoff: float = 30.0,
) -> httpx.AsyncClient:
    """Create the shared AsyncClient with the retrying transport."""
    transport = RetryTransport(
        httpx.AsyncHTTPTransport(),
        max_retries=max_retries,
        backoff_base=backoff_base,
        max_backoff=max_backoff,
    )
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": user_agent},
        follow_redirects=follow_redirects,
    )


class HttpxPageFetcher:
    """Satisfies ``PageFetcherPort`` on top of a shared ``httpx.AsyncClient``."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def get(
        self,
        url: str,
        *,
        referer: str,
        headers: Mapping[str, str] | None = None,
    ) -> PageResponse:
        request_headers = {"Referer": referer}
        if headers:
            request_headers.update(headers)

        try:
            resp = await self._http.get(url, headers=request_headers)
        except httpx.TimeoutException as exc:
            log.warning("page_fetch_timeout", url=url)
            raise FetchConnectionError(url, "timeout") from exc
        except httpx.HTTPError as exc:
            log.warning("page_fetch_failed", url=url, error=str(exc))
            raise FetchConnectionError(url, type(exc).__name__) from exc

        if resp.status_code >= 400:
            log.warning("page_fetch_http_error", url=url, status=resp.status_code)
            raise HttpStatusError(url, resp.status_code)

        return PageResponse(
            url=str(resp.url),
            status_code=resp.status_code,
            text=resp.text,
            headers=dict(resp.headers),
        )
