"""Blob storage endpoints: image proxy, project folders and diagnostics."""

import structlog
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, Response

from solidsteel import config as config_module
from solidsteel.auth.dependencies import require_admin
from solidsteel.errors import BlobConfigurationError, BlobStorageError
from solidsteel.storage.blob import BlobStore, get_blob_store
from solidsteel.storage.project_images import (
    PROJECT_PREFIXES,
    ProjectImageMapper,
    get_project_image_mapper,
    list_project_images,
)
from solidsteel.storage.proxy import TRANSPARENT_PIXEL, BlobProxy, get_blob_proxy

log = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["blob"])

PROJECT_IMAGES_CACHE_CONTROL = "public, s-maxage=3600, stale-while-revalidate=86400"


def _pixel() -> Response:
    return Response(
        content=TRANSPARENT_PIXEL,
        media_type="image/gif",
        headers={"Cache-Control": "no-cache"},
    )


@router.get("/blob-proxy", response_model=None)
async def blob_proxy(
    url: str | None = Query(default=None),
    proxy: BlobProxy = Depends(get_blob_proxy),
) -> Response:
    """Fetch a blob image server-side for clients that cannot load it directly."""
    if not url:
        return JSONResponse(
            {"error": "URL parameter is required"}, status_code=status.HTTP_400_BAD_REQUEST
        )
    if not proxy.is_allowed(url):
        return JSONResponse({"error": "Invalid blob URL"}, status_code=status.HTTP_400_BAD_REQUEST)

    proxied = await proxy.fetch(url)
    if proxied is None:
        return _pixel()

    max_age = config_module.settings.blob_proxy_cache_seconds
    return Response(
        content=proxied.content,
        media_type=proxied.content_type,
        headers={
            "Cache-Control": f"public, max-age={max_age}, s-maxage={max_age}",
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET",
            "X-Proxy-Cache": "HIT",
        },
    )


@router.get("/blob/projects/{slug}/images", response_model=None)
async def project_blob_images(
    slug: str,
    store: BlobStore = Depends(get_blob_store),
) -> JSONResponse:
    """Image files in a project's blob folder."""
    try:
        images = await list_project_images(store, slug)
    except BlobStorageError as e:
        log.error("project_images_failed", slug=slug, error=e.message)
        return JSONResponse(
            {"error": "Failed to fetch project images"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(
        {
            "success": True,
            "images": [image.to_json_dict() for image in images],
            "count": len(images),
        },
        headers={"Cache-Control": PROJECT_IMAGES_CACHE_CONTROL},
    )


@router.post(
    "/blob/projects/{slug}/ensure-folder",
    response_model=None,
    dependencies=[Depends(require_admin)],
)
async def ensure_project_folder(
    slug: str,
    mapper: ProjectImageMapper = Depends(get_project_image_mapper),
) -> JSONResponse:
    try:
        await mapper.ensure_project_folder(slug)
    except BlobStorageError as e:
        log.error("ensure_folder_failed", slug=slug, error=e.message)
        return JSONResponse(
            {"error": "Failed to create project folder"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    mapper.clear_project_cache(slug)
    return JSONResponse({"success": True, "message": f"Folder created for project: {slug}"})


@router.get("/blob/test", response_model=None, dependencies=[Depends(require_admin)])
async def blob_connection_test(store: BlobStore = Depends(get_blob_store)) -> JSONResponse:
    """List a few objects to check the storage credentials."""
    try:
        page = await store.list(limit=10)
    except BlobConfigurationError as e:
        return JSONResponse(
            {"success": False, "error": e.message, "needsToken": True},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    except BlobStorageError as e:
        return JSONResponse(
            {"success": False, "error": e.message, "needsToken": False},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(
        {
            "success": True,
            "files": [blob.to_json_dict() for blob in page.blobs],
            "hasMore": page.has_more,
            "cursor": page.cursor,
        }
    )


def _case_variants(term: str) -> list[str]:
    return list(dict.fromkeys([term, term.lower(), term[:1].upper() + term[1:].lower()]))


@router.get("/blob/search", response_model=None, dependencies=[Depends(require_admin)])
async def search_blobs(
    term: str = Query(..., min_length=1),
    store: BlobStore = Depends(get_blob_store),
) -> JSONResponse:
    """Find where a project's files ended up when its folder name is uncertain."""
    prefixes = [
        f"{base}{variant}/" for base in PROJECT_PREFIXES for variant in _case_variants(term)
    ]

    try:
        found = []
        for prefix in prefixes:
            blobs = await store.list_all(prefix)
            if blobs:
                found.append(
                    {
                        "prefix": prefix,
                        "files": [blob.to_json_dict() for blob in blobs],
                        "count": len(blobs),
                    }
                )

        needle = term.lower()
        matching = [blob for blob in await store.list_all() if needle in blob.pathname.lower()]
    except BlobStorageError as e:
        log.error("blob_search_failed", term=term, error=e.message)
        return JSONResponse(
            {"error": f"Failed to search for {term} files", "details": e.message},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(
        {
            "success": True,
            "term": term,
            "searchedPaths": prefixes,
            "foundInPaths": found,
            "matchingFiles": [blob.to_json_dict() for blob in matching],
            "totalMatchingFiles": len(matching),
        }
    )
