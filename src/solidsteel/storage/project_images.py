"""Project image discovery in blob storage.

Each project may have a folder of images under ``projects/<slug>/`` (older
uploads used ``Projects/<slug>/``). The mapper picks a hero image and an
ordered gallery from that folder and caches the result per project.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import structlog

from solidsteel import config as config_module
from solidsteel.cache import LRUCache
from solidsteel.errors import BlobStorageError
from solidsteel.models.blob import (
    BlobObject,
    ProjectImage,
    ProjectImageMapping,
    ResolvedProjectImages,
)
from solidsteel.models.content import Project
from solidsteel.storage.blob import BlobStore, get_blob_store

log = structlog.get_logger()

PROJECT_PREFIXES = ("projects/", "Projects/")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".avif")
HERO_KEYWORDS = ("hero", "main", "primary", "cover", "featured")
PLACEHOLDER_NAME = ".placeholder"


def is_image(pathname: str) -> bool:
    return pathname.lower().endswith(IMAGE_EXTENSIONS)


def _to_project_image(blob: BlobObject) -> ProjectImage:
    return ProjectImage(
        url=blob.url,
        pathname=blob.pathname,
        filename=blob.pathname.rsplit("/", 1)[-1],
        uploaded_at=blob.uploaded_at,
        size=blob.size,
    )


async def list_project_images(store: BlobStore, slug: str) -> list[ProjectImage]:
    """Images in the project's folder, trying each prefix until one has files."""
    for prefix in PROJECT_PREFIXES:
        blobs = await store.list_all(f"{prefix}{slug}/")
        if blobs:
            log.debug("project_images_listed", slug=slug, prefix=prefix, count=len(blobs))
            return [_to_project_image(blob) for blob in blobs if is_image(blob.pathname)]
    return []


def organize_project_images(slug: str, images: list[ProjectImage]) -> ProjectImageMapping:
    """Pick a hero image and order the rest as the gallery.

    The hero is the first image whose filename contains a hero keyword,
    checked keyword by keyword; failing that, the most recent upload.
    Gallery images are newest first.
    """
    now = datetime.now(UTC)
    if not images:
        return ProjectImageMapping(project_slug=slug, last_updated=now)

    hero: ProjectImage | None = None
    for keyword in HERO_KEYWORDS:
        hero = next((img for img in images if keyword in img.filename.lower()), None)
        if hero is not None:
            break
    if hero is None:
        hero = max(images, key=lambda img: img.uploaded_at)

    gallery = sorted(
        (img for img in images if img.url != hero.url),
        key=lambda img: img.uploaded_at,
        reverse=True,
    )
    return ProjectImageMapping(
        project_slug=slug,
        hero_image=hero.url,
        gallery_images=[img.url for img in gallery],
        last_updated=now,
    )


class ProjectImageMapper:
    """Per-project hero/gallery mapping with a TTL cache."""

    def __init__(self, store: BlobStore, ttl: float = 300.0, maxsize: int = 256) -> None:
        self.store = store
        self._cache: LRUCache[ProjectImageMapping] = LRUCache(maxsize=maxsize, default_ttl=ttl)

    async def get_project_images(self, slug: str) -> ProjectImageMapping:
        """Mapping for ``slug``; storage failures give an empty, uncached mapping."""
        cached = self._cache.get(slug)
        if cached is not None:
            return cached

        try:
            images = await list_project_images(self.store, slug)
        except BlobStorageError as e:
            log.warning("project_images_unavailable", slug=slug, error=e.message)
            return ProjectImageMapping(project_slug=slug, last_updated=datetime.now(UTC))

        mapping = organize_project_images(slug, images)
        self._cache.set(slug, mapping)
        return mapping

    async def ensure_project_folder(self, slug: str) -> str:
        """Create ``Projects/<slug>/`` by writing a placeholder object."""
        pathname = f"Projects/{slug}/{PLACEHOLDER_NAME}"
        result = await self.store.put(pathname, b"", "text/plain", overwrite=True)
        log.info("project_folder_ensured", slug=slug, pathname=result.pathname)
        return result.pathname

    def clear_project_cache(self, slug: str) -> None:
        self._cache.delete(slug)

    def clear_all_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> dict[str, Any]:
        return {**self._cache.stats.to_dict(), "size": self._cache.size}


def resolve_project_images(
    mapping: ProjectImageMapping | None, project: Project
) -> ResolvedProjectImages:
    """Prefer blob images, falling back to the project's static assets."""
    blob_hero = mapping.hero_image if mapping else None
    blob_gallery = mapping.gallery_images if mapping else []

    hero = blob_hero or project.image
    gallery = blob_gallery or project.gallery

    blob_parts = [bool(blob_hero), bool(blob_gallery)]
    static_parts = [
        not blob_hero and bool(project.image),
        not blob_gallery and bool(project.gallery),
    ]
    if any(blob_parts) and any(static_parts):
        source = "mixed"
    elif any(blob_parts):
        source = "blob"
    elif any(static_parts):
        source = "static"
    else:
        source = "none"

    return ResolvedProjectImages(
        project_slug=project.slug, hero_image=hero, gallery_images=gallery, source=source
    )


_mapper: ProjectImageMapper | None = None


def get_project_image_mapper() -> ProjectImageMapper:
    """Get or create the process-wide image mapper."""
    global _mapper  # noqa: PLW0603
    if _mapper is None:
        _mapper = ProjectImageMapper(
            get_blob_store(), ttl=config_module.settings.project_images_cache_ttl
        )
    return _mapper


def reset_project_image_mapper() -> None:
    global _mapper  # noqa: PLW0603
    _mapper = None
