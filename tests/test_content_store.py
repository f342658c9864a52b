"""Tests for JSON content storage and admin record operations."""

import json

import pytest

from solidsteel.content.admin import (
    create_record,
    delete_record,
    generate_slug,
    get_record,
    update_record,
)
from solidsteel.content.store import ContentRepository
from solidsteel.errors import ContentConflictError, ContentNotFoundError, ContentValidationError
from solidsteel.models.content import CaseStudy, Project

NEW_PROJECT = {
    "title": "Casselman Cold Storage",
    "category": "warehouse",
    "description": "Insulated steel warehouse with a blast freezer.",
    "technologies": ["Insulated Panels", "Steel Frame"],
    "projectValue": "$3.4M",
}

NEW_CASE_STUDY = {
    "title": "Recovering the Greystone Schedule",
    "projectSlug": "greystone-village-retirement",
    "projectOverview": "How we kept a retirement community on schedule.",
    "solutionsImplemented": {"approach": "Phased handover", "execution": "Weekly planning"},
}


class TestGenerateSlug:
    def test_basic(self) -> None:
        assert generate_slug("Embrun Ford Dealership") == "embrun-ford-dealership"

    def test_collapses_punctuation_and_trims(self) -> None:
        assert generate_slug("  CANDC Welding – Receiver-Assumed Completion! ") == (
            "candc-welding-receiver-assumed-completion"
        )

    def test_empty(self) -> None:
        assert generate_slug("!!!") == ""


class TestJsonCollection:
    def test_reads_seed_until_first_save(self, repository: ContentRepository) -> None:
        assert repository.projects.materialized is False
        projects = repository.projects.read()
        assert len(projects) == 5
        assert projects[0].slug == "greystone-village-retirement"

    def test_write_materializes_file(self, repository: ContentRepository) -> None:
        projects = repository.projects.read()
        repository.projects.write(projects[:2])

        assert repository.projects.materialized is True
        on_disk = json.loads(repository.projects.path.read_text(encoding="utf-8"))
        assert [p["slug"] for p in on_disk] == [
            "greystone-village-retirement",
            "embrun-ford-dealership",
        ]
        # camelCase on disk
        assert "projectValue" in on_disk[0]
        assert len(repository.projects.read()) == 2

    def test_no_temp_files_left_behind(self, repository: ContentRepository) -> None:
        repository.projects.write(repository.projects.read())
        leftovers = [p.name for p in repository.content_dir.iterdir() if p.suffix == ".tmp"]
        assert leftovers == []

    def test_invalid_file_raises(self, repository: ContentRepository) -> None:
        repository.projects.path.parent.mkdir(parents=True, exist_ok=True)
        repository.projects.path.write_text('[{"id": "1"}]', encoding="utf-8")

        with pytest.raises(ContentValidationError) as exc_info:
            repository.projects.read()
        assert exc_info.value.errors

    def test_services_are_packaged(self, repository: ContentRepository) -> None:
        slugs = [s.slug for s in repository.services()]
        assert slugs[:2] == ["general-contracting", "design-build"]


class TestCreateRecord:
    @pytest.mark.asyncio
    async def test_assigns_server_fields(self, repository: ContentRepository) -> None:
        project = await create_record(repository.projects, Project, NEW_PROJECT)

        assert project.slug == "casselman-cold-storage"
        assert project.id.isdigit()
        assert project.created_at is not None
        assert project.created_at == project.updated_at
        assert len(repository.projects.read()) == 6

    @pytest.mark.asyncio
    async def test_ignores_client_supplied_id_and_slug(self, repository: ContentRepository) -> None:
        data = {**NEW_PROJECT, "id": "1", "slug": "hijacked"}
        project = await create_record(repository.projects, Project, data)
        assert project.id != "1"
        assert project.slug == "casselman-cold-storage"

    @pytest.mark.asyncio
    async def test_accepts_snake_case_keys(self, repository: ContentRepository) -> None:
        data = {**NEW_PROJECT, "project_value": "$9M"}
        data.pop("projectValue")
        project = await create_record(repository.projects, Project, data)
        assert project.project_value == "$9M"

    @pytest.mark.asyncio
    async def test_duplicate_slug_conflicts(self, repository: ContentRepository) -> None:
        with pytest.raises(ContentConflictError):
            await create_record(
                repository.projects, Project, {**NEW_PROJECT, "title": "Embrun Ford Dealership"}
            )
        assert repository.projects.materialized is False

    @pytest.mark.asyncio
    async def test_validation_errors(self, repository: ContentRepository) -> None:
        with pytest.raises(ContentValidationError) as exc_info:
            await create_record(repository.projects, Project, {"title": "No Category"})
        fields = {err["loc"][0] for err in exc_info.value.errors}
        assert "category" in fields

    @pytest.mark.asyncio
    async def test_case_study_dates_default_to_now(self, repository: ContentRepository) -> None:
        case_study = await create_record(repository.case_studies, CaseStudy, NEW_CASE_STUDY)
        assert case_study.slug == "recovering-the-greystone-schedule"
        assert case_study.published_date == case_study.last_updated


class TestUpdateRecord:
    @pytest.mark.asyncio
    async def test_merges_and_reslugs(self, repository: ContentRepository) -> None:
        updated = await update_record(
            repository.projects, Project, "2", {"title": "Embrun Ford Showroom"}
        )
        assert updated.id == "2"
        assert updated.slug == "embrun-ford-showroom"
        # untouched fields survive the merge
        assert updated.project_value == "$8.2M"
        assert get_record(repository.projects, "2").slug == "embrun-ford-showroom"

    @pytest.mark.asyncio
    async def test_keeping_own_slug_is_not_a_conflict(self, repository: ContentRepository) -> None:
        updated = await update_record(repository.projects, Project, "2", {"featured": False})
        assert updated.slug == "embrun-ford-dealership"
        assert updated.featured is False

    @pytest.mark.asyncio
    async def test_slug_of_another_record_conflicts(self, repository: ContentRepository) -> None:
        with pytest.raises(ContentConflictError):
            await update_record(
                repository.projects, Project, "2", {"title": "Greystone Village Retirement"}
            )

    @pytest.mark.asyncio
    async def test_unknown_id(self, repository: ContentRepository) -> None:
        with pytest.raises(ContentNotFoundError):
            await update_record(repository.projects, Project, "missing", {"title": "X"})


class TestDeleteRecord:
    @pytest.mark.asyncio
    async def test_delete_returns_removed(self, repository: ContentRepository) -> None:
        removed = await delete_record(repository.projects, "3")
        assert removed.slug == "pro-xcavation-headquarters"
        assert len(repository.projects.read()) == 4
        with pytest.raises(ContentNotFoundError):
            get_record(repository.projects, "3")

    @pytest.mark.asyncio
    async def test_delete_unknown(self, repository: ContentRepository) -> None:
        with pytest.raises(ContentNotFoundError):
            await delete_record(repository.projects, "missing")
