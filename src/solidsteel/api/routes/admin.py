"""Admin content management: CRUD for projects and case studies."""

import json
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from solidsteel.auth.dependencies import require_admin
from solidsteel.content.admin import create_record, delete_record, get_record, update_record
from solidsteel.content.store import ContentRepository, get_content_repository
from solidsteel.errors import (
    ContentConflictError,
    ContentNotFoundError,
    ContentValidationError,
    SolidSteelError,
)
from solidsteel.models.content import CaseStudy, Project
from solidsteel.storage.project_images import ProjectImageMapper, get_project_image_mapper

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _content_error(error: SolidSteelError) -> JSONResponse:
    if isinstance(error, ContentNotFoundError):
        return JSONResponse(
            {"error": f"{error.details['kind']} not found"}, status_code=status.HTTP_404_NOT_FOUND
        )
    if isinstance(error, ContentConflictError):
        return JSONResponse({"error": error.message}, status_code=status.HTTP_409_CONFLICT)
    if isinstance(error, ContentValidationError):
        return JSONResponse(
            {"error": error.message, "errors": error.errors},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    raise error


async def _json_object(request: Request) -> dict[str, Any] | None:
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def _invalid_body() -> JSONResponse:
    return JSONResponse(
        {"error": "Request body must be a JSON object"}, status_code=status.HTTP_400_BAD_REQUEST
    )


# =============================================================================
# Projects
# =============================================================================


@router.get("/projects", response_model=None)
async def admin_list_projects(
    repository: ContentRepository = Depends(get_content_repository),
) -> JSONResponse:
    return JSONResponse([p.to_json_dict() for p in repository.projects.read()])


@router.post("/projects", response_model=None)
async def admin_create_project(
    request: Request,
    repository: ContentRepository = Depends(get_content_repository),
    mapper: ProjectImageMapper = Depends(get_project_image_mapper),
) -> JSONResponse:
    data = await _json_object(request)
    if data is None:
        return _invalid_body()
    try:
        project = await create_record(repository.projects, Project, data)
    except SolidSteelError as e:
        return _content_error(e)
    mapper.clear_project_cache(project.slug)
    return JSONResponse(project.to_json_dict(), status_code=status.HTTP_201_CREATED)


@router.get("/projects/{project_id}", response_model=None)
async def admin_get_project(
    project_id: str,
    repository: ContentRepository = Depends(get_content_repository),
) -> JSONResponse:
    try:
        project = get_record(repository.projects, project_id)
    except SolidSteelError as e:
        return _content_error(e)
    return JSONResponse(project.to_json_dict())


@router.put("/projects/{project_id}", response_model=None)
async def admin_update_project(
    project_id: str,
    request: Request,
    repository: ContentRepository = Depends(get_content_repository),
    mapper: ProjectImageMapper = Depends(get_project_image_mapper),
) -> JSONResponse:
    data = await _json_object(request)
    if data is None:
        return _invalid_body()
    try:
        previous_slug = get_record(repository.projects, project_id).slug
        project = await update_record(repository.projects, Project, project_id, data)
    except SolidSteelError as e:
        return _content_error(e)
    mapper.clear_project_cache(previous_slug)
    mapper.clear_project_cache(project.slug)
    return JSONResponse(project.to_json_dict())


@router.delete("/projects/{project_id}", response_model=None)
async def admin_delete_project(
    project_id: str,
    repository: ContentRepository = Depends(get_content_repository),
    mapper: ProjectImageMapper = Depends(get_project_image_mapper),
) -> JSONResponse:
    try:
        project = await delete_record(repository.projects, project_id)
    except SolidSteelError as e:
        return _content_error(e)
    mapper.clear_project_cache(project.slug)
    return JSONResponse({"success": True})


# =============================================================================
# Case studies
# =============================================================================


@router.get("/case-studies", response_model=None)
async def admin_list_case_studies(
    repository: ContentRepository = Depends(get_content_repository),
) -> JSONResponse:
    return JSONResponse([cs.to_json_dict() for cs in repository.case_studies.read()])


@router.post("/case-studies", response_model=None)
async def admin_create_case_study(
    request: Request,
    repository: ContentRepository = Depends(get_content_repository),
) -> JSONResponse:
    data = await _json_object(request)
    if data is None:
        return _invalid_body()
    try:
        case_study = await create_record(repository.case_studies, CaseStudy, data)
    except SolidSteelError as e:
        return _content_error(e)
    return JSONResponse(case_study.to_json_dict(), status_code=status.HTTP_201_CREATED)


@router.get("/case-studies/{case_study_id}", response_model=None)
async def admin_get_case_study(
    case_study_id: str,
    repository: ContentRepository = Depends(get_content_repository),
) -> JSONResponse:
    try:
        case_study = get_record(repository.case_studies, case_study_id)
    except SolidSteelError as e:
        return _content_error(e)
    return JSONResponse(case_study.to_json_dict())


@router.put("/case-studies/{case_study_id}", response_model=None)
async def admin_update_case_study(
    case_study_id: str,
    request: Request,
    repository: ContentRepository = Depends(get_content_repository),
) -> JSONResponse:
    data = await _json_object(request)
    if data is None:
        return _invalid_body()
    try:
        case_study = await update_record(repository.case_studies, CaseStudy, case_study_id, data)
    except SolidSteelError as e:
        return _content_error(e)
    return JSONResponse(case_study.to_json_dict())


@router.delete("/case-studies/{case_study_id}", response_model=None)
async def admin_delete_case_study(
    case_study_id: str,
    repository: ContentRepository = Depends(get_content_repository),
) -> JSONResponse:
    try:
        await delete_record(repository.case_studies, case_study_id)
    except SolidSteelError as e:
        return _content_error(e)
    return JSONResponse({"success": True})
