"""Content inspection commands."""

from collections import Counter
from enum import StrEnum
from typing import Annotated

import typer

from solidsteel.cli.common import console, create_table, error, info, print_json, success, truncate
from solidsteel.content.store import ContentRepository, get_content_repository
from solidsteel.errors import ContentValidationError

app = typer.Typer(help="Inspect and validate site content")


class ContentKind(StrEnum):
    projects = "projects"
    case_studies = "case-studies"
    services = "services"


@app.command("list")
def list_content(
    kind: Annotated[
        ContentKind, typer.Argument(help="Which content to list")
    ] = ContentKind.projects,
    table_out: Annotated[
        bool, typer.Option("--table", "-t", help="Table output (human-readable)")
    ] = False,
) -> None:
    """List content records. Default: JSON output."""
    repository = get_content_repository()
    try:
        if kind is ContentKind.projects:
            records = repository.projects.read()
            rows = [(p.slug, p.title, p.category, p.status) for p in records]
            columns = ("Slug", "Title", "Category", "Status")
        elif kind is ContentKind.case_studies:
            records = repository.case_studies.read()
            rows = [
                (c.slug, c.title, c.project_slug, c.published_date.date().isoformat())
                for c in records
            ]
            columns = ("Slug", "Title", "Project", "Published")
        else:
            records = repository.services()
            rows = [(s.slug, s.title, s.short_title, str(len(s.faqs))) for s in records]
            columns = ("Slug", "Title", "Short title", "FAQs")
    except ContentValidationError as e:
        error(e.message)
        raise typer.Exit(1) from e

    if not table_out:
        print_json([record.to_json_dict() for record in records])
        return

    if not records:
        info(f"No {kind.value} found")
        return

    table = create_table(kind.value.replace("-", " ").title(), *columns)
    for row in rows:
        table.add_row(row[0], truncate(row[1], 45), *row[2:])
    console.print(table)


def find_content_problems(repository: ContentRepository) -> list[str]:
    """Schema, uniqueness and cross-reference problems across all content."""
    problems: list[str] = []

    project_slugs: set[str] = set()
    collections = (("projects", repository.projects), ("case studies", repository.case_studies))
    loaded = {}
    for label, collection in collections:
        try:
            loaded[label] = collection.read()
        except ContentValidationError as e:
            for err in e.errors:
                location = ".".join(str(part) for part in err.get("loc", ()))
                problems.append(f"{label}: {location}: {err.get('msg', 'invalid')}")
            continue

        for field in ("id", "slug"):
            counts = Counter(getattr(record, field) for record in loaded[label])
            problems.extend(
                f"{label}: duplicate {field} {value!r}" for value, n in counts.items() if n > 1
            )

    if "projects" in loaded:
        project_slugs = {project.slug for project in loaded["projects"]}
        for case_study in loaded.get("case studies", []):
            if case_study.project_slug not in project_slugs:
                problems.append(
                    f"case studies: {case_study.slug!r} references unknown project "
                    f"{case_study.project_slug!r}"
                )

    services = repository.services()
    service_slugs = {service.slug for service in services}
    for service in services:
        problems.extend(
            f"services: {service.slug!r} links to unknown service {related!r}"
            for related in service.related_service_slugs
            if related not in service_slugs
        )

    return problems


@app.command("validate")
def validate_content() -> None:
    """Check content files against the schemas and each other."""
    repository = get_content_repository()
    problems = find_content_problems(repository)
    if problems:
        for problem in problems:
            error(problem)
        raise typer.Exit(1)

    source = "content files" if repository.projects.materialized else "packaged seed data"
    success(f"Content is valid ({source})")
