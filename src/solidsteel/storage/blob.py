"""Blob storage backends.

``VercelBlobStore`` talks to the Vercel Blob REST API; ``LocalBlobStore``
keeps objects in a directory for development and tests. Both hand back the
same models so callers never care which one is configured.
"""

from __future__ import annotations

import mimetypes
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import Path
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

import httpx
import structlog

from solidsteel import config as config_module
from solidsteel.errors import BlobConfigurationError, BlobStorageError
from solidsteel.models.blob import BlobObject, BlobPage, UploadResult
from solidsteel.utils.resilience import BLOB_LIST_RETRY, retry

log = structlog.get_logger()

DEFAULT_LIST_LIMIT = 1000
BLOB_REQUEST_TIMEOUT = 30.0


class BlobStore(ABC):
    """Object storage for uploaded images and videos."""

    @abstractmethod
    async def put(
        self, pathname: str, data: bytes, content_type: str, *, overwrite: bool = False
    ) -> UploadResult:
        """Store ``data`` at ``pathname`` (no random suffix) and return its public URL."""

    @abstractmethod
    async def delete(self, urls: list[str]) -> None:
        """Delete objects by public URL."""

    @abstractmethod
    async def list(
        self, prefix: str = "", limit: int = DEFAULT_LIST_LIMIT, cursor: str | None = None
    ) -> BlobPage:
        """One page of objects whose pathname starts with ``prefix``."""

    async def list_all(self, prefix: str = "") -> list[BlobObject]:
        """Every object under ``prefix``, following cursors."""
        blobs: list[BlobObject] = []
        cursor: str | None = None
        while True:
            page = await self.list(prefix=prefix, cursor=cursor)
            blobs.extend(page.blobs)
            if not page.has_more or not page.cursor:
                return blobs
            cursor = page.cursor


# =============================================================================
# Vercel Blob
# =============================================================================


class VercelBlobStore(BlobStore):
    """Vercel Blob over its REST API."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str = "https://blob.vercel-storage.com",
        api_version: str = "7",
        timeout: float = BLOB_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._api_version = api_version
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self._token:
            raise BlobConfigurationError(
                "Blob storage token is not configured (set BLOB_READ_WRITE_TOKEN)"
            )
        return {
            "authorization": f"Bearer {self._token}",
            "x-api-version": self._api_version,
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    def _check(self, response: httpx.Response, operation: str) -> None:
        if response.is_success:
            return
        log.error(
            "blob_request_failed",
            operation=operation,
            status=response.status_code,
            body=response.text[:200],
        )
        if response.status_code in (401, 403):
            raise BlobConfigurationError(
                "Blob storage rejected the access token",
                details={"operation": operation, "status": response.status_code},
            )
        raise BlobStorageError(
            f"Blob storage {operation} failed",
            details={"operation": operation, "status": response.status_code},
        )

    async def put(
        self, pathname: str, data: bytes, content_type: str, *, overwrite: bool = False
    ) -> UploadResult:
        headers = {
            **self._headers(),
            "x-content-type": content_type,
            "x-add-random-suffix": "0",
        }
        if overwrite:
            headers["x-allow-overwrite"] = "1"

        try:
            async with self._client() as client:
                response = await client.put(
                    f"{self._api_url}/{quote(pathname)}", content=data, headers=headers
                )
        except httpx.HTTPError as e:
            log.error("blob_upload_error", pathname=pathname, error=str(e))
            raise BlobStorageError("Failed to upload file to blob storage") from e

        self._check(response, "upload")
        body = response.json()
        log.info("blob_uploaded", pathname=body.get("pathname", pathname), size=len(data))
        return UploadResult(
            url=body["url"],
            pathname=body.get("pathname", pathname),
            content_type=body.get("contentType") or content_type,
            content_disposition=body.get("contentDisposition") or "",
        )

    async def delete(self, urls: list[str]) -> None:
        if not urls:
            return
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self._api_url}/delete", json={"urls": urls}, headers=self._headers()
                )
        except httpx.HTTPError as e:
            log.error("blob_delete_error", count=len(urls), error=str(e))
            raise BlobStorageError("Failed to delete file from blob storage") from e

        self._check(response, "delete")
        log.info("blob_deleted", count=len(urls))

    @retry(config=BLOB_LIST_RETRY)
    async def _fetch_page(self, params: dict[str, str]) -> httpx.Response:
        async with self._client() as client:
            return await client.get(self._api_url, params=params, headers=self._headers())

    async def list(
        self, prefix: str = "", limit: int = DEFAULT_LIST_LIMIT, cursor: str | None = None
    ) -> BlobPage:
        params = {"limit": str(limit)}
        if prefix:
            params["prefix"] = prefix
        if cursor:
            params["cursor"] = cursor

        try:
            response = await self._fetch_page(params)
        except httpx.HTTPError as e:
            raise BlobStorageError("Failed to list blob files", details={"prefix": prefix}) from e

        self._check(response, "list")
        body = response.json()
        return BlobPage(
            blobs=[
                BlobObject(
                    url=item["url"],
                    pathname=item["pathname"],
                    size=item.get("size", 0),
                    uploaded_at=item["uploadedAt"],
                )
                for item in body.get("blobs", [])
            ],
            has_more=bool(body.get("hasMore")),
            cursor=body.get("cursor"),
        )


# =============================================================================
# Local directory
# =============================================================================


class LocalBlobStore(BlobStore):
    """Directory-backed store; cursors are listing offsets."""

    def __init__(self, root: Path, base_url: str) -> None:
        self.root = root
        self.base_url = base_url.rstrip("/")

    def _resolve(self, pathname: str) -> Path:
        root = self.root.resolve()
        target = (root / pathname.lstrip("/")).resolve()
        if not pathname.strip("/") or not target.is_relative_to(root) or target == root:
            raise BlobStorageError(
                f"Invalid blob pathname: {pathname}", details={"pathname": pathname}
            )
        return target

    def _url(self, pathname: str) -> str:
        return f"{self.base_url}/{quote(pathname)}"

    async def put(
        self, pathname: str, data: bytes, content_type: str, *, overwrite: bool = False
    ) -> UploadResult:
        target = self._resolve(pathname)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        log.info("blob_uploaded", pathname=pathname, size=len(data), backend="local")
        return UploadResult(
            url=self._url(pathname),
            pathname=pathname,
            content_type=content_type,
            content_disposition=f'inline; filename="{target.name}"',
        )

    async def delete(self, urls: list[str]) -> None:
        prefix = self.base_url + "/"
        for url in urls:
            if not url.startswith(prefix):
                log.warning("blob_delete_skipped", url=url, reason="not_local")
                continue
            self._resolve(unquote(url[len(prefix) :])).unlink(missing_ok=True)
        log.info("blob_deleted", count=len(urls), backend="local")

    async def list(
        self, prefix: str = "", limit: int = DEFAULT_LIST_LIMIT, cursor: str | None = None
    ) -> BlobPage:
        if not self.root.exists():
            return BlobPage()

        files = sorted(
            (path for path in self.root.rglob("*") if path.is_file()),
            key=lambda path: path.relative_to(self.root).as_posix(),
        )
        matching = [
            path for path in files if path.relative_to(self.root).as_posix().startswith(prefix)
        ]

        start = int(cursor) if cursor else 0
        window = matching[start : start + limit]
        end = start + len(window)
        has_more = end < len(matching)

        blobs = []
        for path in window:
            pathname = path.relative_to(self.root).as_posix()
            stat = path.stat()
            blobs.append(
                BlobObject(
                    url=self._url(pathname),
                    pathname=pathname,
                    size=stat.st_size,
                    uploaded_at=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
                )
            )
        return BlobPage(blobs=blobs, has_more=has_more, cursor=str(end) if has_more else None)


# =============================================================================
# Helpers
# =============================================================================


def optimized_image_url(
    url: str,
    *,
    width: int | None = None,
    height: int | None = None,
    quality: int | None = None,
    format: str | None = None,  # noqa: A002
) -> str:
    """Add resize/format query parameters (w, h, q, f) to a blob URL."""
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query))
    for key, value in (("w", width), ("h", height), ("q", quality), ("f", format)):
        if value:
            query[key] = str(value)
    return urlunsplit(parts._replace(query=urlencode(query)))


def _extension(filename: str, default: str = "jpg") -> str:
    _, dot, ext = filename.rpartition(".")
    return ext.lower() if dot and ext else default


def project_image_pathname(slug: str, kind: str, filename: str, *, timestamp: int) -> str:
    """``projects/<slug>/<kind>-<timestamp>.<ext>`` for hero, gallery or thumbnail images."""
    return f"projects/{slug}/{kind}-{timestamp}.{_extension(filename)}"


def company_asset_pathname(
    kind: str, filename: str, *, name: str | None = None, timestamp: int
) -> str:
    """``company/<kind>/<name>.<ext>`` for logos, team and partner photos."""
    return f"company/{kind}/{name or f'asset-{timestamp}'}.{_extension(filename)}"


def guess_content_type(pathname: str, default: str = "application/octet-stream") -> str:
    return mimetypes.guess_type(pathname)[0] or default


_store: BlobStore | None = None


def get_blob_store() -> BlobStore:
    """Get or create the configured blob store."""
    global _store  # noqa: PLW0603
    if _store is None:
        settings = config_module.settings
        if settings.blob_backend == "local":
            _store = LocalBlobStore(settings.blob_local_dir, settings.blob_local_base_url)
        else:
            _store = VercelBlobStore(
                settings.blob_read_write_token.get_secret_value(),
                api_url=settings.blob_api_url,
                api_version=settings.blob_api_version,
            )
    return _store


def reset_blob_store() -> None:
    """Drop the cached store so the next call reads current settings."""
    global _store  # noqa: PLW0603
    _store = None
