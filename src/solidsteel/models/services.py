"""Service page models."""

from pydantic import Field

from solidsteel.models.common import CamelModel


class ServiceFeature(CamelModel):
    title: str
    description: str


class ProcessStep(CamelModel):
    title: str
    description: str


class FAQ(CamelModel):
    question: str
    answer: str


class Service(CamelModel):
    """A service line page (general contracting, design-build, ...)."""

    slug: str
    title: str
    short_title: str
    icon: str = Field(..., description="Icon name rendered by the frontend")
    tagline: str
    meta_title: str
    meta_description: str
    keywords: list[str] = Field(default_factory=list)
    overview: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)
    features: list[ServiceFeature] = Field(default_factory=list)
    process: list[ProcessStep] = Field(default_factory=list)
    faqs: list[FAQ] = Field(default_factory=list)
    related_service_slugs: list[str] = Field(default_factory=list)
