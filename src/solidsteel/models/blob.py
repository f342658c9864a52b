"""Blob storage and project image models."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from solidsteel.models.common import CamelModel


class BlobObject(CamelModel):
    """A stored object as reported by a listing."""

    url: str
    pathname: str
    size: int = 0
    uploaded_at: datetime


class BlobPage(CamelModel):
    """One page of a blob listing."""

    blobs: list[BlobObject] = Field(default_factory=list)
    has_more: bool = False
    cursor: str | None = None


class UploadResult(CamelModel):
    url: str
    pathname: str
    content_type: str = ""
    content_disposition: str = ""


class ProjectImage(CamelModel):
    """An image file found in a project's blob folder."""

    url: str
    pathname: str
    filename: str
    uploaded_at: datetime
    size: int = 0


class ProjectImageMapping(CamelModel):
    """Hero and gallery images for a project as found in blob storage."""

    project_slug: str
    hero_image: str | None = None
    gallery_images: list[str] = Field(default_factory=list)
    last_updated: datetime


class ResolvedProjectImages(CamelModel):
    """Images to render for a project after falling back to static assets."""

    project_slug: str
    hero_image: str | None = None
    gallery_images: list[str] = Field(default_factory=list)
    source: Literal["blob", "static", "mixed", "none"] = "none"
