"""JSON-file content storage.

Projects and case studies are kept as JSON arrays under the configured
content directory. Until the admin saves for the first time, the seed data
packaged with the service is served instead.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from importlib import resources
from pathlib import Path
from typing import Generic, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from solidsteel import config as config_module
from solidsteel.errors import ContentValidationError
from solidsteel.models.common import CamelModel
from solidsteel.models.content import CaseStudy, Project
from solidsteel.models.services import Service

log = structlog.get_logger()

SEED_PACKAGE = "solidsteel.content.data"

T = TypeVar("T", bound=CamelModel)


def _read_seed(name: str) -> str:
    return resources.files(SEED_PACKAGE).joinpath(name).read_text(encoding="utf-8")


class JsonCollection(Generic[T]):
    """A list of records persisted as one JSON file.

    Reads are cached until the file's mtime changes. Writers must hold
    ``lock`` across their read-modify-write cycle.
    """

    def __init__(self, path: Path, model: type[T], *, kind: str, seed_name: str) -> None:
        self.path = path
        self.kind = kind
        self._seed_name = seed_name
        self._adapter = TypeAdapter(list[model])
        self._cached: list[T] | None = None
        self._cached_mtime: float | None = None
        self.lock = asyncio.Lock()

    @property
    def materialized(self) -> bool:
        """Whether the collection has its own file (vs. packaged seed data)."""
        return self.path.exists()

    def _parse(self, raw: str, source: str) -> list[T]:
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            log.error("content_file_invalid", kind=self.kind, source=source, errors=e.error_count())
            raise ContentValidationError(
                self.kind, e.errors(include_url=False, include_context=False)
            ) from e

    def read(self) -> list[T]:
        """Return all records (a fresh list; records themselves are shared)."""
        if self.path.exists():
            mtime = self.path.stat().st_mtime
            if self._cached is None or self._cached_mtime != mtime:
                self._cached = self._parse(self.path.read_text(encoding="utf-8"), str(self.path))
                self._cached_mtime = mtime
        elif self._cached is None or self._cached_mtime is not None:
            self._cached = self._parse(_read_seed(self._seed_name), f"seed:{self._seed_name}")
            self._cached_mtime = None
        return list(self._cached)

    def write(self, items: list[T]) -> None:
        """Atomically replace the file contents."""
        payload = [item.to_json_dict() for item in items]
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        self._cached = list(items)
        self._cached_mtime = self.path.stat().st_mtime
        log.info("content_saved", kind=self.kind, path=str(self.path), count=len(items))


class ContentRepository:
    """All site content: editable projects and case studies, packaged services."""

    def __init__(self, content_dir: Path) -> None:
        self.content_dir = content_dir
        self.projects: JsonCollection[Project] = JsonCollection(
            content_dir / "projects.json", Project, kind="Project", seed_name="projects.json"
        )
        self.case_studies: JsonCollection[CaseStudy] = JsonCollection(
            content_dir / "case_studies.json",
            CaseStudy,
            kind="Case study",
            seed_name="case_studies.json",
        )
        self._services: list[Service] | None = None

    def services(self) -> list[Service]:
        if self._services is None:
            adapter = TypeAdapter(list[Service])
            self._services = adapter.validate_json(_read_seed("services.json"))
        return list(self._services)


_repository: ContentRepository | None = None


def get_content_repository() -> ContentRepository:
    """Get or create the content repository for the configured directory."""
    global _repository  # noqa: PLW0603
    content_dir = config_module.settings.content_dir
    if _repository is None or _repository.content_dir != content_dir:
        _repository = ContentRepository(content_dir)
    return _repository
