"""API request/response schemas not covered by the domain models."""

from typing import Any

from pydantic import Field

from solidsteel.models.common import CamelModel
from solidsteel.models.content import CaseStudy, Project
from solidsteel.models.services import Service


class LoginRequest(CamelModel):
    username: str = ""
    password: str = ""


class SessionStatus(CamelModel):
    is_logged_in: bool


class UploadResponse(CamelModel):
    success: bool = True
    url: str
    pathname: str


class ProjectDetail(CamelModel):
    """A project page: the project plus what links out from it."""

    project: Project
    related: list[Project] = Field(default_factory=list)
    has_case_study: bool = False
    case_study_slug: str | None = None


class CaseStudyDetail(CamelModel):
    case_study: CaseStudy
    related: list[CaseStudy] = Field(default_factory=list)
    project: Project | None = None


class ServiceDetail(CamelModel):
    service: Service
    related: list[Service] = Field(default_factory=list)


class ProjectFacets(CamelModel):
    categories: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class HealthResponse(CamelModel):
    status: str = "healthy"
    version: str
    environment: str
    details: dict[str, Any] = Field(default_factory=dict)
