"""Content models: projects and case studies.

These are the records edited through the admin API and rendered on the
public project and case study pages.
"""

from typing import Literal

from pydantic import Field

from solidsteel.models.common import CamelModel, UtcDatetime

ProjectCategory = Literal["commercial", "industrial", "warehouse", "garage", "takeover"]
ProjectStatus = Literal["completed", "in-progress", "planned"]
LessonAudience = Literal["client", "industry", "both"]


class Project(CamelModel):
    """A completed or ongoing construction project."""

    id: str = Field(..., min_length=1, description="Record id")
    title: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, description="URL slug derived from title")
    category: ProjectCategory
    description: str
    location: str | None = None
    completion_date: str | None = None
    client: str | None = None
    square_footage: str | None = None
    image: str | None = Field(default=None, description="Static hero image path")
    gallery: list[str] = Field(default_factory=list, description="Static gallery image paths")
    challenge: str | None = None
    solution: str | None = None
    results: str | None = None
    features: list[str] = Field(default_factory=list)

    technologies: list[str] = Field(default_factory=list)
    project_value: str | None = Field(default=None, description="Display value, e.g. '$12.5M'")
    duration: str | None = None
    status: ProjectStatus = "completed"
    tags: list[str] = Field(default_factory=list)
    year: int | None = None
    featured: bool = False
    has_case_study: bool = False

    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None


# =============================================================================
# Case study sections
# =============================================================================


class CaseStudyTestimonial(CamelModel):
    quote: str
    author: str
    position: str
    company: str | None = None
    image: str | None = None


class CaseStudyMetric(CamelModel):
    label: str
    value: str
    description: str | None = None
    category: Literal["timeline", "budget", "quality", "safety", "performance", "stakeholder"]


class CaseStudyTechnology(CamelModel):
    name: str
    category: Literal["structural", "mechanical", "electrical", "safety", "materials", "equipment"]
    description: str
    impact: str | None = None


class CaseStudyLesson(CamelModel):
    title: str
    description: str
    audience: LessonAudience
    category: Literal["technical", "management", "financial", "regulatory", "safety"]


class CaseStudyTimeline(CamelModel):
    phase: str
    duration: str
    description: str
    challenges: list[str] = Field(default_factory=list)
    outcomes: list[str] = Field(default_factory=list)


class SolutionsImplemented(CamelModel):
    approach: str
    strategies: list[str] = Field(default_factory=list)
    execution: str
    execution_details: list[str] = Field(default_factory=list)


class DistressedProjectDetails(CamelModel):
    original_contractor: str | None = None
    reason_for_takeover: str
    percentage_complete: float = Field(..., ge=0, le=100)
    stakeholders: list[str] = Field(default_factory=list)
    legal_complications: list[str] = Field(default_factory=list)
    recovery_strategy: list[str] = Field(default_factory=list)


class CommercialProjectDetails(CamelModel):
    tenant_coordination: list[str] = Field(default_factory=list)
    regulatory_requirements: list[str] = Field(default_factory=list)
    business_continuity: list[str] = Field(default_factory=list)
    public_safety: list[str] = Field(default_factory=list)


class IndustrialProjectDetails(CamelModel):
    safety_protocols: list[str] = Field(default_factory=list)
    specialized_equipment: list[str] = Field(default_factory=list)
    environmental_considerations: list[str] = Field(default_factory=list)
    operational_requirements: list[str] = Field(default_factory=list)


class CaseStudy(CamelModel):
    """Long-form write-up of a project, linked by ``project_slug``."""

    id: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    subtitle: str = ""
    project_slug: str = Field(..., min_length=1, description="Slug of the project written up")

    project_overview: str
    challenges_faced: list[str] = Field(default_factory=list)
    solutions_implemented: SolutionsImplemented
    technologies_utilized: list[CaseStudyTechnology] = Field(default_factory=list)
    results_achieved: list[str] = Field(default_factory=list)
    lessons_learned: list[CaseStudyLesson] = Field(default_factory=list)

    key_metrics: list[CaseStudyMetric] = Field(default_factory=list)
    testimonials: list[CaseStudyTestimonial] = Field(default_factory=list)
    timeline: list[CaseStudyTimeline] = Field(default_factory=list)

    distressed_details: DistressedProjectDetails | None = None
    commercial_details: CommercialProjectDetails | None = None
    industrial_details: IndustrialProjectDetails | None = None

    hero_image: str | None = None
    gallery_images: list[str] = Field(default_factory=list)

    featured: bool = False
    published_date: UtcDatetime
    last_updated: UtcDatetime
    conclusion: str = ""

    meta_description: str | None = None
    keywords: list[str] = Field(default_factory=list)

    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None
