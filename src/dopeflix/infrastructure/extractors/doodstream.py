"""DoodStream extractor: single direct file from a doodstream embed page.

Extraction: GET embed page → extract /pass_md5/ URL + token →
GET pass_md5 endpoint → append token + expiry to get video URL.

NOTE: Fails when a captcha (reCaptchaV2/Turnstile) is required.
In that case extract() returns None.
"""

from __future__ import annotations

import re
import time
from urllib.parse import urlparse

import structlog

from dopeflix.domain.entities.media import (
    Preferences,
    ResolvedSource,
    ServerFamily,
    VideoVariant,
)
from dopeflix.domain.exceptions import FetchError
from dopeflix.domain.ports.page_fetcher import PageFetcherPort

log = structlog.get_logger(__name__)

_PASS_MD5_RE = re.compile(r"'(/pass_md5/[^<>\"']+)'")
_TOKEN_RE = re.compile(r"&token=([a-z0-9]+)")


class DoodStreamExtractor:
    """Resolves DoodStream embed pages to one playable variant.

    Returns None if the video is offline or a captcha is required.
    """

    def __init__(self, fetcher: PageFetcherPort) -> None:
        self._fetcher = fetcher

    @property
    def family(self) -> ServerFamily:
        return ServerFamily.DOODSTREAM

    async def extract(
        self,
        source: ResolvedSource,
        preferences: Preferences,
    ) -> list[VideoVariant] | None:
        variant = await self.video_from_url(source.embed_url, source.server_name)
        return [variant] if variant is not None else None

    async def video_from_url(self, url: str, server_name: str) -> VideoVariant | None:
        """Fetch a DoodStream embed page and build the direct video URL."""
        embed_url = self._normalize_embed_url(url)

        try:
            resp = await self._fetcher.get(embed_url, referer=embed_url)
        except FetchError:
            log.warning("doodstream_request_failed", url=embed_url)
            return None

        html = resp.text
        base_url = resp.url

        if self._is_offline(html):
            log.info("doodstream_offline", url=url)
            return None

        if self._has_captcha(html):
            log.warning("doodstream_captcha_required", url=url)
            return None

        pass_match = _PASS_MD5_RE.search(html)
        if not pass_match:
            log.warning("doodstream_no_pass_md5", url=url)
            return None

        token_match = _TOKEN_RE.search(html)
        if not token_match:
            log.warning("doodstream_no_token", url=url)
            return None
        token = token_match.group(1)

        # pass_md5 lives on whatever mirror the embed redirected to
        parsed = urlparse(base_url)
        full_pass_url = f"{parsed.scheme}://{parsed.netloc}{pass_match.group(1)}"

        try:
            pass_resp = await self._fetcher.get(
                full_pass_url,
                referer=base_url,
                headers={"X-Requested-With": "XMLHttpRequest"},
            )
        except FetchError:
            log.warning("doodstream_pass_md5_failed", url=full_pass_url)
            return None

        video_base = pass_resp.text.strip()
        if not video_base.startswith("http"):
            log.warning("doodstream_invalid_video_base", base=video_base[:50])
            return None

        expiry = int(time.time() * 1000)
        video_url = f"{video_base}?token={token}&expiry={expiry}"

        log.debug("doodstream_resolved", video_url=video_url[:80])
        return VideoVariant(
            url=video_url,
            quality=f"{server_name} - Default",
            headers={"Referer": base_url},
        )

    def _normalize_embed_url(self, url: str) -> str:
        """Ensure URL uses the /e/ embed format."""
        if "/e/" in url:
            return url
        return url.replace("/d/", "/e/", 1)

    def _is_offline(self, html: str) -> bool:
        """Check various DoodStream offline markers."""
        if '<iframe src="/e/"' in html and "minimalUserResponseInMiliseconds" not in html:
            return True
        if re.search(r"<h1>\s*Oops!\s*Sorry\s*</h1>", html):
            return True
        if re.search(r"<title>\s*Video not found\s*\|\s*DoodStream", html):
            return True
        return False

    def _has_captcha(self, html: str) -> bool:
        """Check if captcha is required before extraction."""
        if "op=validate&gc_response=" in html:
            return True
        if "data-sitekey=" in html:
            return True
        return "cf-turnstile" in html.lower()
