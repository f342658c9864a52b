"""Public content endpoints: projects, case studies and services."""

from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from solidsteel.api.schemas import CaseStudyDetail, ProjectDetail, ProjectFacets, ServiceDetail
from solidsteel.content.case_studies import CaseStudyCatalog
from solidsteel.content.projects import ProjectCatalog
from solidsteel.content.services import ServiceCatalog
from solidsteel.content.store import ContentRepository, get_content_repository
from solidsteel.models.blob import ResolvedProjectImages
from solidsteel.models.content import CaseStudy, CaseStudyLesson, CaseStudyTechnology, Project
from solidsteel.models.services import Service
from solidsteel.storage.project_images import (
    ProjectImageMapper,
    get_project_image_mapper,
    resolve_project_images,
)

router = APIRouter(prefix="/api", tags=["content"])


def _not_found(kind: str, slug: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} not found: {slug}")


# =============================================================================
# Projects
# =============================================================================


@router.get("/projects", response_model_exclude_none=True)
async def list_projects(
    category: str | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    featured: bool | None = None,
    technology: str | None = None,
    q: str | None = Query(
        default=None, description="Search title, description, tags and technologies"
    ),
    limit: int | None = Query(default=None, ge=1, le=100),
    repository: ContentRepository = Depends(get_content_repository),
) -> list[Project]:
    catalog = ProjectCatalog(repository)
    projects = catalog.search(q) if q else catalog.all()

    if category:
        projects = [p for p in projects if p.category == category]
    if status_filter:
        projects = [p for p in projects if p.status == status_filter]
    if featured is not None:
        projects = [p for p in projects if p.featured == featured]
    if technology:
        projects = [p for p in projects if technology in p.technologies]

    return projects[:limit] if limit else projects


@router.get("/projects/facets")
async def project_facets(
    repository: ContentRepository = Depends(get_content_repository),
) -> ProjectFacets:
    catalog = ProjectCatalog(repository)
    return ProjectFacets(
        categories=catalog.categories(),
        technologies=catalog.technologies(),
        tags=catalog.tags(),
    )


@router.get("/projects/stats")
async def project_stats(
    repository: ContentRepository = Depends(get_content_repository),
) -> dict[str, Any]:
    return ProjectCatalog(repository).statistics()


@router.get("/projects/{slug}", response_model_exclude_none=True)
async def get_project(
    slug: str,
    repository: ContentRepository = Depends(get_content_repository),
) -> ProjectDetail:
    catalog = ProjectCatalog(repository)
    project = catalog.by_slug(slug)
    if project is None:
        raise _not_found("Project", slug)

    case_study = CaseStudyCatalog(repository).for_project(slug)
    return ProjectDetail(
        project=project,
        related=catalog.related(slug),
        has_case_study=case_study is not None,
        case_study_slug=case_study.slug if case_study else None,
    )


@router.get("/projects/{slug}/images")
async def get_project_images(
    slug: str,
    repository: ContentRepository = Depends(get_content_repository),
    mapper: ProjectImageMapper = Depends(get_project_image_mapper),
) -> ResolvedProjectImages:
    """Hero and gallery images, from blob storage when available."""
    project = ProjectCatalog(repository).by_slug(slug)
    if project is None:
        raise _not_found("Project", slug)
    mapping = await mapper.get_project_images(slug)
    return resolve_project_images(mapping, project)


# =============================================================================
# Case studies
# =============================================================================


@router.get("/case-studies", response_model_exclude_none=True)
async def list_case_studies(
    featured: bool | None = None,
    category: str | None = Query(default=None, description="Category of the written-up project"),
    limit: int | None = Query(default=None, ge=1, le=100),
    repository: ContentRepository = Depends(get_content_repository),
) -> list[CaseStudy]:
    catalog = CaseStudyCatalog(repository)
    case_studies = catalog.by_category(category) if category else catalog.all()
    if featured is not None:
        case_studies = [cs for cs in case_studies if cs.featured == featured]
    return case_studies[:limit] if limit else case_studies


@router.get("/case-studies/stats")
async def case_study_stats(
    repository: ContentRepository = Depends(get_content_repository),
) -> dict[str, Any]:
    return CaseStudyCatalog(repository).statistics()


@router.get("/case-studies/technologies", response_model_exclude_none=True)
async def case_study_technologies(
    repository: ContentRepository = Depends(get_content_repository),
) -> list[CaseStudyTechnology]:
    return CaseStudyCatalog(repository).technologies()


@router.get("/case-studies/lessons")
async def case_study_lessons(
    audience: Literal["client", "industry", "both"] = "both",
    repository: ContentRepository = Depends(get_content_repository),
) -> list[CaseStudyLesson]:
    return CaseStudyCatalog(repository).lessons_by_audience(audience)


@router.get("/case-studies/{slug}", response_model_exclude_none=True)
async def get_case_study(
    slug: str,
    repository: ContentRepository = Depends(get_content_repository),
) -> CaseStudyDetail:
    catalog = CaseStudyCatalog(repository)
    case_study = catalog.by_slug(slug)
    if case_study is None:
        raise _not_found("Case study", slug)
    return CaseStudyDetail(
        case_study=case_study,
        related=catalog.related(slug),
        project=ProjectCatalog(repository).by_slug(case_study.project_slug),
    )


# =============================================================================
# Services
# =============================================================================


@router.get("/services")
async def list_services(
    repository: ContentRepository = Depends(get_content_repository),
) -> list[Service]:
    return ServiceCatalog(repository).all()


@router.get("/services/{slug}")
async def get_service(
    slug: str,
    repository: ContentRepository = Depends(get_content_repository),
) -> ServiceDetail:
    catalog = ServiceCatalog(repository)
    service = catalog.by_slug(slug)
    if service is None:
        raise _not_found("Service", slug)
    return ServiceDetail(service=service, related=catalog.related(slug))
