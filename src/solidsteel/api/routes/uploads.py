"""Image and video uploads to blob storage."""

import re
import time

import structlog
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse

from solidsteel import config as config_module
from solidsteel.api.rate_limit import forms_limit, limiter
from solidsteel.auth.dependencies import require_admin
from solidsteel.errors import BlobStorageError
from solidsteel.storage.blob import BlobStore, get_blob_store

log = structlog.get_logger()

router = APIRouter(prefix="/api/upload", tags=["uploads"])

UPLOAD_FOLDERS = ("general", "quote-requests", "proforma-consultations", "projects")
IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp", "image/avif")
IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "webp", "avif")
VIDEO_TYPES = ("video/mp4", "video/webm", "video/ogg", "video/quicktime")

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def upload_folder(requested: str | None) -> str:
    """Whitelisted folder, defaulting to ``general``."""
    return requested if requested in UPLOAD_FOLDERS else "general"


def image_extension(filename: str | None) -> str:
    """Sanitised extension from the client filename; ``jpg`` unless whitelisted."""
    ext = _NON_ALNUM.sub("", (filename or "").rsplit(".", 1)[-1].lower())
    return ext if ext in IMAGE_EXTENSIONS else "jpg"


async def _read_limited(file: UploadFile, max_bytes: int) -> bytes | None:
    """File contents, or None if larger than ``max_bytes``."""
    if file.size is not None and file.size > max_bytes:
        return None
    data = await file.read(max_bytes + 1)
    return None if len(data) > max_bytes else data


@router.post("", response_model=None)
@limiter.limit(forms_limit)
async def upload_image(
    request: Request,
    file: UploadFile | None = File(default=None),
    folder: str | None = Form(default=None),
    store: BlobStore = Depends(get_blob_store),
) -> JSONResponse:
    """Upload an image attached to a form or project."""
    if file is None:
        return _error("No file provided")
    if file.content_type not in IMAGE_TYPES:
        return _error("Invalid file type")

    data = await _read_limited(file, config_module.settings.upload_max_image_bytes)
    if data is None:
        return _error("File too large")

    pathname = f"{upload_folder(folder)}/{int(time.time() * 1000)}.{image_extension(file.filename)}"
    try:
        result = await store.put(pathname, data, file.content_type)
    except BlobStorageError as e:
        log.error("upload_failed", pathname=pathname, error=e.message)
        return _error("Failed to upload file", status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse({"success": True, "url": result.url, "pathname": result.pathname})


@router.post("/video", response_model=None, dependencies=[Depends(require_admin)])
async def upload_hero_video(
    file: UploadFile | None = File(default=None),
    store: BlobStore = Depends(get_blob_store),
) -> JSONResponse:
    """Replace the homepage hero video."""
    if file is None:
        return _error("No file provided")
    if file.content_type not in VIDEO_TYPES:
        return _error(f"Invalid file type. Allowed types: {', '.join(VIDEO_TYPES)}")

    max_bytes = config_module.settings.upload_max_video_bytes
    data = await _read_limited(file, max_bytes)
    if data is None:
        return _error(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB")

    pathname = config_module.settings.hero_video_pathname
    try:
        result = await store.put(pathname, data, file.content_type, overwrite=True)
    except BlobStorageError as e:
        log.error("video_upload_failed", pathname=pathname, error=e.message)
        return _error("Failed to upload video", status.HTTP_500_INTERNAL_SERVER_ERROR)

    log.info("hero_video_uploaded", pathname=result.pathname, size=len(data))
    return JSONResponse({"success": True, "url": result.url, "pathname": result.pathname})
