"""Data models for content, forms and blob storage."""

from solidsteel.models.blob import (
    BlobObject,
    BlobPage,
    ProjectImage,
    ProjectImageMapping,
    ResolvedProjectImages,
    UploadResult,
)
from solidsteel.models.content import (
    CaseStudy,
    CaseStudyLesson,
    CaseStudyTechnology,
    Project,
)
from solidsteel.models.forms import (
    ContactSubmission,
    NewsletterSignup,
    ProformaBudgetRequest,
    QuoteRequest,
)
from solidsteel.models.services import Service

__all__ = [
    "BlobObject",
    "BlobPage",
    "CaseStudy",
    "CaseStudyLesson",
    "CaseStudyTechnology",
    "ContactSubmission",
    "NewsletterSignup",
    "ProformaBudgetRequest",
    "Project",
    "ProjectImage",
    "ProjectImageMapping",
    "QuoteRequest",
    "ResolvedProjectImages",
    "Service",
    "UploadResult",
]
