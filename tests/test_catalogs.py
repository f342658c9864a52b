"""Tests for public content queries and the sitemap."""

from datetime import UTC, date, datetime
from xml.etree import ElementTree as ET

import pytest

from solidsteel.config import Settings
from solidsteel.content.case_studies import CaseStudyCatalog
from solidsteel.content.projects import ProjectCatalog, parse_project_value
from solidsteel.content.services import ServiceCatalog
from solidsteel.content.sitemap import (
    SITEMAP_NS,
    STATIC_ROUTES,
    build_sitemap_entries,
    render_sitemap,
)
from solidsteel.content.store import ContentRepository


class TestParseProjectValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("$12.5M", 12.5), ("$8.2M", 8.2), ("1,200,000", 1200000.0), ("TBD", 0.0), (None, 0.0)],
    )
    def test_values(self, value: str | None, expected: float) -> None:
        assert parse_project_value(value) == expected


class TestProjectCatalog:
    def test_by_slug(self, repository: ContentRepository) -> None:
        catalog = ProjectCatalog(repository)
        project = catalog.by_slug("embrun-ford-dealership")
        assert project is not None
        assert project.category == "commercial"
        assert catalog.by_slug("missing") is None

    def test_featured_with_limit(self, repository: ContentRepository) -> None:
        catalog = ProjectCatalog(repository)
        assert len(catalog.featured()) == 3
        assert [p.slug for p in catalog.featured(limit=1)] == ["greystone-village-retirement"]

    def test_categories_in_first_seen_order(self, repository: ContentRepository) -> None:
        assert ProjectCatalog(repository).categories() == ["commercial", "industrial", "takeover"]

    def test_related_same_category(self, repository: ContentRepository) -> None:
        related = ProjectCatalog(repository).related("pro-xcavation-headquarters")
        assert [p.slug for p in related] == ["marc-forget-transport-facility"]

    def test_search_matches_tags_and_technologies(self, repository: ContentRepository) -> None:
        catalog = ProjectCatalog(repository)
        assert [p.slug for p in catalog.search("WELDING")] == ["candc-welding-completion"]
        assert [p.slug for p in catalog.search("crane")] == ["pro-xcavation-headquarters"]

    def test_by_technology_exact(self, repository: ContentRepository) -> None:
        catalog = ProjectCatalog(repository)
        assert [p.slug for p in catalog.by_technology("Fuel Storage")] == [
            "marc-forget-transport-facility"
        ]
        assert catalog.by_technology("fuel storage") == []

    def test_statistics(self, repository: ContentRepository) -> None:
        stats = ProjectCatalog(repository).statistics()
        assert stats["totalProjects"] == 5
        assert stats["completedProjects"] == 5
        assert stats["featuredProjects"] == 3
        assert stats["categories"] == 3
        assert stats["totalValue"] == pytest.approx(36.4)

    def test_technologies_sorted(self, repository: ContentRepository) -> None:
        technologies = ProjectCatalog(repository).technologies()
        assert technologies == sorted(technologies)
        assert "Steel Frame" in technologies


class TestCaseStudyCatalog:
    def test_project_link(self, repository: ContentRepository) -> None:
        catalog = CaseStudyCatalog(repository)
        assert catalog.project_has_case_study("candc-welding-completion") is True
        assert catalog.project_has_case_study("embrun-ford-dealership") is False

    def test_by_category_goes_through_project(self, repository: ContentRepository) -> None:
        catalog = CaseStudyCatalog(repository)
        assert len(catalog.by_category("takeover")) == 1
        assert catalog.by_category("commercial") == []

    def test_lessons_include_both_audience(self, repository: ContentRepository) -> None:
        catalog = CaseStudyCatalog(repository)
        assert len(catalog.lessons_by_audience("client")) == 3
        assert len(catalog.lessons_by_audience("industry")) == 4
        assert len(catalog.lessons_by_audience("both")) == 2

    def test_technologies_unique_and_sorted(self, repository: ContentRepository) -> None:
        names = [tech.name for tech in CaseStudyCatalog(repository).technologies()]
        assert names == sorted(names, key=str.lower)
        assert len(names) == len(set(names))

    def test_statistics(self, repository: ContentRepository) -> None:
        stats = CaseStudyCatalog(repository).statistics()
        assert stats == {
            "totalCaseStudies": 1,
            "featuredCaseStudies": 1,
            "categoriesCount": 1,
            "technologiesCount": 5,
            "averageLessonsPerCase": 5,
        }

    def test_statistics_empty(self, repository: ContentRepository) -> None:
        repository.case_studies.write([])
        stats = CaseStudyCatalog(repository).statistics()
        assert stats["totalCaseStudies"] == 0
        assert stats["averageLessonsPerCase"] == 0

    def test_average_lessons_rounds_half_up(self, repository: ContentRepository) -> None:
        seed = repository.case_studies.read()[0]
        assert len(seed.lessons_learned) == 5
        repository.case_studies.write(
            [seed, seed.model_copy(update={"id": "2", "slug": "second", "lessons_learned": []})]
        )

        assert CaseStudyCatalog(repository).statistics()["averageLessonsPerCase"] == 3

    def test_related_needs_known_case_study(self, repository: ContentRepository) -> None:
        catalog = CaseStudyCatalog(repository)
        assert catalog.related("missing") == []
        assert catalog.related("candc-welding-completion") == []


class TestServiceCatalog:
    def test_related_in_listed_order(self, repository: ContentRepository) -> None:
        related = ServiceCatalog(repository).related("design-build")
        assert [s.slug for s in related] == ["general-contracting", "steel-construction"]

    def test_unknown_service(self, repository: ContentRepository) -> None:
        catalog = ServiceCatalog(repository)
        assert catalog.by_slug("demolition") is None
        assert catalog.related("demolition") == []


class TestSitemap:
    def test_entries(self, repository: ContentRepository, settings: Settings) -> None:
        today = date(2024, 6, 1)
        entries = build_sitemap_entries(repository, settings, today=today)
        by_url = {entry.url: entry for entry in entries}

        home = by_url["https://solidsteelmgt.ca"]
        assert home.priority == 1.0
        assert by_url["https://solidsteelmgt.ca/about"].priority == 0.8

        case_study = by_url["https://solidsteelmgt.ca/case-studies/candc-welding-completion"]
        assert case_study.priority == 0.7
        assert case_study.last_modified == date(2023, 4, 15)

        project = by_url["https://solidsteelmgt.ca/projects/embrun-ford-dealership"]
        assert project.last_modified == today
        assert "https://solidsteelmgt.ca/services/design-build" in by_url

        assert len(entries) == len(STATIC_ROUTES) + 1 + 1 + 5 + 5

    def test_project_entries_use_build_date(
        self, repository: ContentRepository, settings: Settings
    ) -> None:
        projects = repository.projects.read()
        edited = projects[0].model_copy(update={"updated_at": datetime(2022, 1, 5, tzinfo=UTC)})
        repository.projects.write([edited, *projects[1:]])
        today = date(2024, 6, 1)

        entries = build_sitemap_entries(repository, settings, today=today)

        url = settings.site_url(f"/projects/{edited.slug}")
        assert next(e for e in entries if e.url == url).last_modified == today

    def test_render(self, repository: ContentRepository, settings: Settings) -> None:
        xml = render_sitemap(build_sitemap_entries(repository, settings, today=date(2024, 6, 1)))
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')

        root = ET.fromstring(xml.split("\n", 1)[1])
        urls = root.findall(f"{{{SITEMAP_NS}}}url")
        assert urls
        first = urls[0]
        assert first.find(f"{{{SITEMAP_NS}}}loc").text == "https://solidsteelmgt.ca"
        assert first.find(f"{{{SITEMAP_NS}}}priority").text == "1.0"
