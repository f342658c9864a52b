"""Blob storage backends and project image resolution."""

from solidsteel.storage.blob import (
    BlobStore,
    LocalBlobStore,
    VercelBlobStore,
    company_asset_pathname,
    get_blob_store,
    optimized_image_url,
    project_image_pathname,
    reset_blob_store,
)
from solidsteel.storage.project_images import (
    ProjectImageMapper,
    get_project_image_mapper,
    list_project_images,
    organize_project_images,
    resolve_project_images,
)

__all__ = [
    "BlobStore",
    "LocalBlobStore",
    "ProjectImageMapper",
    "VercelBlobStore",
    "company_asset_pathname",
    "get_blob_store",
    "get_project_image_mapper",
    "list_project_images",
    "optimized_image_url",
    "organize_project_images",
    "project_image_pathname",
    "reset_blob_store",
    "resolve_project_images",
]
