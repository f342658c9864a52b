"""Service page queries."""

from solidsteel.content.store import ContentRepository
from solidsteel.models.services import Service


class ServiceCatalog:
    def __init__(self, repository: ContentRepository) -> None:
        self._repository = repository

    def all(self) -> list[Service]:
        return self._repository.services()

    def by_slug(self, slug: str) -> Service | None:
        return next((s for s in self.all() if s.slug == slug), None)

    def slugs(self) -> list[str]:
        return [s.slug for s in self.all()]

    def related(self, slug: str) -> list[Service]:
        """Services listed in ``relatedServiceSlugs``, in that order; unknown slugs skipped."""
        service = self.by_slug(slug)
        if service is None:
            return []
        related = (self.by_slug(s) for s in service.related_service_slugs)
        return [s for s in related if s is not None]
