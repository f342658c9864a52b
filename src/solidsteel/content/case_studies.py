"""Public case study queries.

Case studies are categorised through the project they write up, so most
category lookups go through the project catalog.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from solidsteel.content.projects import ProjectCatalog
from solidsteel.content.store import ContentRepository
from solidsteel.models.content import CaseStudy, CaseStudyLesson, CaseStudyTechnology


def _newest_first(case_studies: list[CaseStudy]) -> list[CaseStudy]:
    return sorted(case_studies, key=lambda cs: cs.published_date, reverse=True)


class CaseStudyCatalog:
    """Read-only queries over the case study collection."""

    def __init__(self, repository: ContentRepository) -> None:
        self._repository = repository
        self._projects = ProjectCatalog(repository)

    def _category_of(self, case_study: CaseStudy) -> str | None:
        project = self._projects.by_slug(case_study.project_slug)
        return project.category if project else None

    def all(self) -> list[CaseStudy]:
        """All case studies, most recently published first."""
        return _newest_first(self._repository.case_studies.read())

    def by_slug(self, slug: str) -> CaseStudy | None:
        return next((cs for cs in self._repository.case_studies.read() if cs.slug == slug), None)

    def featured(self, limit: int | None = None) -> list[CaseStudy]:
        featured = [cs for cs in self.all() if cs.featured]
        return featured[:limit] if limit else featured

    def by_category(self, category: str) -> list[CaseStudy]:
        return [cs for cs in self.all() if self._category_of(cs) == category]

    def project_has_case_study(self, project_slug: str) -> bool:
        return self.for_project(project_slug) is not None

    def for_project(self, project_slug: str) -> CaseStudy | None:
        return next(
            (cs for cs in self._repository.case_studies.read() if cs.project_slug == project_slug),
            None,
        )

    def related(self, slug: str, limit: int = 3) -> list[CaseStudy]:
        current = self.by_slug(slug)
        if current is None:
            return []
        category = self._category_of(current)
        if category is None:
            return []
        return [
            cs for cs in self.all() if cs.slug != slug and self._category_of(cs) == category
        ][:limit]

    def technologies(self) -> list[CaseStudyTechnology]:
        """Technologies across all case studies, first entry per name, sorted by name."""
        seen: dict[str, CaseStudyTechnology] = {}
        for cs in self._repository.case_studies.read():
            for tech in cs.technologies_utilized:
                seen.setdefault(tech.name, tech)
        return sorted(seen.values(), key=lambda tech: tech.name.lower())

    def lessons_by_audience(
        self, audience: Literal["client", "industry", "both"]
    ) -> list[CaseStudyLesson]:
        """Lessons for an audience; lessons for ``both`` are always included."""
        return [
            lesson
            for cs in self._repository.case_studies.read()
            for lesson in cs.lessons_learned
            if lesson.audience in (audience, "both")
        ]

    def statistics(self) -> dict[str, Any]:
        case_studies = self._repository.case_studies.read()
        categories = {c for c in (self._category_of(cs) for cs in case_studies) if c}
        technologies = {tech.name for cs in case_studies for tech in cs.technologies_utilized}
        total_lessons = sum(len(cs.lessons_learned) for cs in case_studies)
        return {
            "totalCaseStudies": len(case_studies),
            "featuredCaseStudies": sum(1 for cs in case_studies if cs.featured),
            "categoriesCount": len(categories),
            "technologiesCount": len(technologies),
            "averageLessonsPerCase": (
                math.floor(total_lessons / len(case_studies) + 0.5) if case_studies else 0
            ),
        }

    def static_params(self) -> list[dict[str, str]]:
        return [{"slug": cs.slug} for cs in self._repository.case_studies.read()]
