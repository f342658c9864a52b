"""Public project queries."""

from __future__ import annotations

import re
from typing import Any

from solidsteel.content.store import ContentRepository
from solidsteel.models.content import Project

_NON_NUMERIC = re.compile(r"[^\d.]")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_project_value(value: str | None) -> float:
    """Numeric part of a display value such as '$12.5M' (0 when absent)."""
    if not value:
        return 0.0
    match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", value))
    return float(match.group()) if match else 0.0


class ProjectCatalog:
    """Read-only queries over the project collection."""

    def __init__(self, repository: ContentRepository) -> None:
        self._repository = repository

    def all(self) -> list[Project]:
        return self._repository.projects.read()

    def by_slug(self, slug: str) -> Project | None:
        return next((p for p in self.all() if p.slug == slug), None)

    def by_category(self, category: str) -> list[Project]:
        return [p for p in self.all() if p.category == category]

    def by_status(self, status: str) -> list[Project]:
        return [p for p in self.all() if p.status == status]

    def featured(self, limit: int | None = None) -> list[Project]:
        featured = [p for p in self.all() if p.featured]
        return featured[:limit] if limit else featured

    def by_technology(self, technology: str) -> list[Project]:
        return [p for p in self.all() if technology in p.technologies]

    def search(self, term: str) -> list[Project]:
        """Case-insensitive match on title, description, tags and technologies."""
        needle = term.lower()
        return [
            p
            for p in self.all()
            if needle in p.title.lower()
            or needle in p.description.lower()
            or any(needle in tag.lower() for tag in p.tags)
            or any(needle in tech.lower() for tech in p.technologies)
        ]

    def related(self, slug: str, limit: int = 3) -> list[Project]:
        """Other projects in the same category."""
        current = self.by_slug(slug)
        if current is None:
            return []
        return [p for p in self.all() if p.category == current.category and p.slug != slug][:limit]

    def categories(self) -> list[str]:
        """Unique categories in first-seen order."""
        return list(dict.fromkeys(p.category for p in self.all()))

    def technologies(self) -> list[str]:
        return sorted({tech for p in self.all() for tech in p.technologies})

    def tags(self) -> list[str]:
        return sorted({tag for p in self.all() for tag in p.tags})

    def statistics(self) -> dict[str, Any]:
        projects = self.all()
        return {
            "totalProjects": len(projects),
            "completedProjects": sum(1 for p in projects if p.status == "completed"),
            "inProgressProjects": sum(1 for p in projects if p.status == "in-progress"),
            "featuredProjects": sum(1 for p in projects if p.featured),
            "totalValue": sum(parse_project_value(p.project_value) for p in projects),
            "categories": len(self.categories()),
            "technologies": len(self.technologies()),
        }

    def static_params(self) -> list[dict[str, str]]:
        return [{"slug": p.slug} for p in self.all()]
