"""Server-side fetches of blob-hosted images.

Browsers that fail to load a blob URL directly retry through the proxy,
which fetches the object server-side and serves it with long cache headers.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from urllib.parse import urlsplit

import httpx
import structlog

from solidsteel import config as config_module

log = structlog.get_logger()

# Transparent 1x1 GIF served when the upstream fetch fails
TRANSPARENT_PIXEL = base64.b64decode("R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7")

PROXY_USER_AGENT = "Mozilla/5.0 (compatible; SolidSteel-Proxy/1.0)"


@dataclass
class ProxiedObject:
    content: bytes
    content_type: str


class BlobProxy:
    def __init__(
        self,
        allowed_host: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.allowed_host = allowed_host.lower()
        self._timeout = timeout
        self._transport = transport

    def is_allowed(self, url: str) -> bool:
        """Only https URLs on the blob host (or its subdomains) are proxied."""
        try:
            parts = urlsplit(url)
            host = (parts.hostname or "").lower()
        except ValueError:
            return False
        return parts.scheme == "https" and (
            host == self.allowed_host or host.endswith("." + self.allowed_host)
        )

    async def fetch(self, url: str) -> ProxiedObject | None:
        """Fetch ``url``; None on any upstream failure."""
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport, follow_redirects=True
            ) as client:
                response = await client.get(url, headers={"User-Agent": PROXY_USER_AGENT})
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
            log.error("blob_proxy_error", url=url, error=str(e))
            return None

        if not response.is_success:
            log.error("blob_proxy_fetch_failed", url=url, status=response.status_code)
            return None

        return ProxiedObject(
            content=response.content,
            content_type=response.headers.get("content-type", "application/octet-stream"),
        )


_proxy: BlobProxy | None = None


def get_blob_proxy() -> BlobProxy:
    global _proxy  # noqa: PLW0603
    if _proxy is None:
        settings = config_module.settings
        _proxy = BlobProxy(
            settings.blob_proxy_allowed_host, timeout=settings.blob_proxy_timeout_seconds
        )
    return _proxy
