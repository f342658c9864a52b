"""Blob storage maintenance commands: folder listing, coverage report, migration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from solidsteel.cli.common import (
    console,
    create_table,
    error,
    format_megabytes,
    hint,
    info,
    print_json,
    run_async,
    success,
    warn,
)
from solidsteel.content.store import get_content_repository
from solidsteel.errors import BlobConfigurationError, BlobStorageError
from solidsteel.models.blob import BlobObject
from solidsteel.models.content import Project
from solidsteel.storage.blob import BlobStore, get_blob_store, guess_content_type
from solidsteel.storage.project_images import PROJECT_PREFIXES

app = typer.Typer(help="Blob storage folders, reports and migration")

IMAGE_KINDS = ("hero", "gallery", "thumbnail")


@dataclass
class FolderSummary:
    """Objects found in one project folder."""

    name: str
    count: int = 0
    total_size: int = 0
    last_updated: datetime | None = None
    filenames: list[str] = field(default_factory=list)

    def add(self, blob: BlobObject, filename: str) -> None:
        self.count += 1
        self.total_size += blob.size
        self.filenames.append(filename)
        if self.last_updated is None or blob.uploaded_at > self.last_updated:
            self.last_updated = blob.uploaded_at

    def breakdown(self) -> dict[str, int]:
        counts = dict.fromkeys((*IMAGE_KINDS, "other"), 0)
        for filename in self.filenames:
            counts[classify_filename(filename)] += 1
        return counts

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "count": self.count,
            "totalSize": self.total_size,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "breakdown": self.breakdown(),
        }


@dataclass
class MigrationItem:
    source: str
    path: Path
    pathname: str


def classify_filename(filename: str) -> str:
    lowered = filename.lower()
    for kind in IMAGE_KINDS:
        if kind in lowered:
            return kind
    return "other"


def group_project_folders(blobs: list[BlobObject]) -> dict[str, FolderSummary]:
    """Group blobs by the folder directly under the projects prefix, sorted by name."""
    folders: dict[str, FolderSummary] = {}
    for blob in blobs:
        parts = blob.pathname.split("/")
        if len(parts) < 3 or not parts[1].strip():
            continue
        summary = folders.setdefault(parts[1], FolderSummary(parts[1]))
        summary.add(blob, "/".join(parts[2:]))
    return dict(sorted(folders.items()))


def _is_local_asset(source: str) -> bool:
    return source.startswith("/") and "?" not in source and "://" not in source


def plan_migration(
    projects: list[Project], public_dir: Path
) -> tuple[list[MigrationItem], list[str]]:
    """Map each project's static hero and gallery files to blob pathnames.

    Returns the uploads to perform and the static paths that were skipped
    (remote URLs, generated placeholders and files missing on disk).
    """
    items: list[MigrationItem] = []
    skipped: list[str] = []

    for project in projects:
        sources: list[tuple[str, str]] = []
        if project.image:
            sources.append((project.image, "hero"))
        sources.extend(
            (image, f"gallery-{index}") for index, image in enumerate(project.gallery, start=1)
        )

        for source, name in sources:
            path = public_dir / source.lstrip("/")
            if not _is_local_asset(source) or not path.is_file():
                skipped.append(source)
                continue
            ext = path.suffix.lstrip(".").lower() or "png"
            items.append(MigrationItem(source, path, f"projects/{project.slug}/{name}.{ext}"))

    return items, skipped


async def _project_blobs(store: BlobStore) -> list[BlobObject]:
    blobs: list[BlobObject] = []
    for prefix in PROJECT_PREFIXES:
        blobs.extend(await store.list_all(prefix))
    return blobs


def _storage_failed(e: BlobStorageError) -> NoReturn:
    error(f"Blob storage request failed: {e.message}")
    if isinstance(e, BlobConfigurationError):
        hint("Set SOLIDSTEEL_BLOB_READ_WRITE_TOKEN or use SOLIDSTEEL_BLOB_BACKEND=local")
    raise typer.Exit(1)


@app.command("folders")
def list_folders(
    table_out: Annotated[
        bool, typer.Option("--table", "-t", help="Table output (human-readable)")
    ] = False,
) -> None:
    """List project folders in blob storage. Default: JSON output."""

    @run_async
    async def _folders() -> None:
        try:
            folders = group_project_folders(await _project_blobs(get_blob_store()))
        except BlobStorageError as e:
            _storage_failed(e)

        if not table_out:
            print_json([summary.to_dict() for summary in folders.values()])
            return

        if not folders:
            info("No project folders found in blob storage")
            return

        table = create_table("Project folders", "Folder", "Images", "Size (MB)", "Last update")
        for summary in folders.values():
            table.add_row(
                summary.name,
                str(summary.count),
                format_megabytes(summary.total_size),
                summary.last_updated.date().isoformat() if summary.last_updated else "Unknown",
            )
        console.print(table)

        total_images = sum(s.count for s in folders.values())
        total_size = sum(s.total_size for s in folders.values())
        info(
            f"{len(folders)} folders | {total_images} images | "
            f"{format_megabytes(total_size)} MB"
        )

    _folders()


def build_report(projects: list[Project], folders: dict[str, FolderSummary]) -> dict[str, object]:
    """Compare each project's blob folder against its static images."""
    entries = []
    for project in projects:
        folder = folders.get(project.slug)
        entry: dict[str, object] = {
            "slug": project.slug,
            "title": project.title,
            "featured": project.featured,
            "source": "blob" if folder else "static",
        }
        if folder:
            entry.update(
                count=folder.count,
                totalSize=folder.total_size,
                breakdown=folder.breakdown(),
                lastUpdated=folder.last_updated.isoformat() if folder.last_updated else None,
            )
        else:
            entry.update(
                staticHero=project.image,
                staticGallery=len(project.gallery),
                hasPlaceholders=any(
                    "placeholder" in image or ".svg" in image for image in project.gallery
                ),
            )
        entries.append(entry)

    slugs = {project.slug for project in projects}
    with_blob = sum(1 for project in projects if project.slug in folders)
    return {
        "projects": entries,
        "orphanedFolders": [name for name in folders if name not in slugs],
        "summary": {
            "totalProjects": len(projects),
            "withBlobImages": with_blob,
            "usingStaticFallbacks": len(projects) - with_blob,
            "featuredWithBlobImages": sum(
                1 for project in projects if project.featured and project.slug in folders
            ),
            "featuredTotal": sum(1 for project in projects if project.featured),
            "totalBlobImages": sum(s.count for s in folders.values()),
            "totalBlobSize": sum(s.total_size for s in folders.values()),
        },
    }


@app.command("report")
def project_report(
    table_out: Annotated[
        bool, typer.Option("--table", "-t", help="Table output (human-readable)")
    ] = False,
) -> None:
    """Report which projects have uploaded images and which use static fallbacks."""

    @run_async
    async def _report() -> None:
        projects = get_content_repository().projects.read()
        try:
            folders = group_project_folders(await _project_blobs(get_blob_store()))
        except BlobStorageError as e:
            _storage_failed(e)

        report = build_report(projects, folders)
        if not table_out:
            print_json(report)
            return

        table = create_table("Project images", "Project", "Source", "Images", "Breakdown")
        for entry in report["projects"]:
            if entry["source"] == "blob":
                breakdown = ", ".join(
                    f"{count} {kind}" for kind, count in entry["breakdown"].items() if count
                )
                table.add_row(entry["slug"], "blob", str(entry["count"]), breakdown)
            else:
                note = "placeholders" if entry["hasPlaceholders"] else ""
                table.add_row(entry["slug"], "static", str(entry["staticGallery"]), note)
        console.print(table)

        summary = report["summary"]
        info(
            f"{summary['withBlobImages']}/{summary['totalProjects']} projects have uploaded images "
            f"({format_megabytes(summary['totalBlobSize'])} MB)"
        )
        for name in report["orphanedFolders"]:
            warn(f"Orphaned blob folder with no matching project: {name}")

    _report()


@app.command("migrate")
def migrate_images(
    public_dir: Annotated[
        Path,
        typer.Argument(
            help="Directory holding the static site assets", exists=True, file_okay=False
        ),
    ],
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show the plan without uploading")
    ] = False,
    mapping_file: Annotated[
        Path, typer.Option("--mapping-file", "-o", help="Where to write the local to URL mapping")
    ] = Path("image-url-mapping.json"),
) -> None:
    """Upload projects' static hero and gallery images into blob storage."""

    @run_async
    async def _migrate() -> None:
        items, skipped = plan_migration(get_content_repository().projects.read(), public_dir)
        for source in skipped:
            warn(f"Skipping {source}")

        if dry_run:
            for item in items:
                info(f"{item.source} -> {item.pathname}")
            success(f"{len(items)} images would be uploaded")
            return

        store = get_blob_store()
        uploaded: dict[str, str] = {}
        failed = 0
        for item in items:
            try:
                result = await store.put(
                    item.pathname,
                    item.path.read_bytes(),
                    guess_content_type(item.pathname),
                    overwrite=True,
                )
            except BlobStorageError as e:
                error(f"Failed to upload {item.source}: {e.message}")
                failed += 1
                continue
            uploaded[item.source] = result.url
            success(f"Uploaded {item.source} -> {result.url}")

        mapping_file.write_text(json.dumps(uploaded, indent=2) + "\n", encoding="utf-8")
        info(f"Uploaded {len(uploaded)} images, {failed} failed")
        info(f"Image URL mapping saved to {mapping_file}")
        if failed:
            raise typer.Exit(1)

    _migrate()
