"""Admin create/update/delete over the content collections."""

from __future__ import annotations

import re
import time
from datetime import UTC, datetime
from typing import Any, TypeVar

import structlog
from pydantic import ValidationError

from solidsteel.content.store import JsonCollection
from solidsteel.errors import ContentConflictError, ContentNotFoundError, ContentValidationError
from solidsteel.models.common import CamelModel
from solidsteel.models.content import CaseStudy

log = structlog.get_logger()

T = TypeVar("T", bound=CamelModel)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")

# Fields the server owns; client-supplied values are ignored
_SERVER_FIELDS = ("id", "slug", "created_at", "updated_at")


def generate_slug(title: str) -> str:
    """Lowercase, collapse runs of non-alphanumerics to '-', trim dashes."""
    return _NON_SLUG_CHARS.sub("-", title.lower()).strip("-")


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _new_id(existing: set[str]) -> str:
    candidate = int(time.time() * 1000)
    while str(candidate) in existing:
        candidate += 1
    return str(candidate)


def _normalize_keys(model: type[CamelModel], data: dict[str, Any]) -> dict[str, Any]:
    """Map snake_case field names onto their camelCase aliases."""
    aliases = {name: info.alias or name for name, info in model.model_fields.items()}
    return {aliases.get(key, key): value for key, value in data.items()}


def _server_aliases(model: type[CamelModel]) -> set[str]:
    return {model.model_fields[name].alias or name for name in _SERVER_FIELDS}


def _validate(collection: JsonCollection[T], model: type[T], raw: dict) -> T:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ContentValidationError(
            collection.kind, e.errors(include_url=False, include_context=False)
        ) from e


def _check_slug(
    collection: JsonCollection, items: list, slug: str, *, exclude_id: str | None
) -> None:
    if any(item.slug == slug and item.id != exclude_id for item in items):
        raise ContentConflictError(collection.kind, slug)


async def create_record(
    collection: JsonCollection[T], model: type[T], data: dict[str, Any]
) -> T:
    """Create a record with a fresh id, derived slug and timestamps."""
    async with collection.lock:
        items = collection.read()
        now = _now()

        fields = _normalize_keys(model, data)
        for key in _server_aliases(model):
            fields.pop(key, None)

        fields["id"] = _new_id({item.id for item in items})
        fields["slug"] = generate_slug(str(fields.get("title") or ""))
        fields["createdAt"] = now
        fields["updatedAt"] = now
        if model is CaseStudy:
            fields.setdefault("publishedDate", now)
            fields.setdefault("lastUpdated", now)

        record = _validate(collection, model, fields)
        _check_slug(collection, items, record.slug, exclude_id=None)

        items.append(record)
        collection.write(items)

    log.info("content_created", kind=collection.kind, id=record.id, slug=record.slug)
    return record


async def update_record(
    collection: JsonCollection[T], model: type[T], record_id: str, data: dict[str, Any]
) -> T:
    """Merge ``data`` onto an existing record and re-derive its slug."""
    async with collection.lock:
        items = collection.read()
        index = next((i for i, item in enumerate(items) if item.id == record_id), None)
        if index is None:
            raise ContentNotFoundError(collection.kind, record_id)

        existing = items[index]
        updates = _normalize_keys(model, data)
        for key in _server_aliases(model):
            updates.pop(key, None)

        merged = {**existing.to_json_dict(), **updates}
        merged["id"] = existing.id
        merged["slug"] = generate_slug(str(merged.get("title") or ""))
        merged["updatedAt"] = _now()
        if model is CaseStudy:
            merged["lastUpdated"] = merged["updatedAt"]

        record = _validate(collection, model, merged)
        _check_slug(collection, items, record.slug, exclude_id=record_id)

        items[index] = record
        collection.write(items)

    log.info("content_updated", kind=collection.kind, id=record_id, slug=record.slug)
    return record


async def delete_record(collection: JsonCollection[T], record_id: str) -> T:
    """Remove a record, returning it."""
    async with collection.lock:
        items = collection.read()
        for index, item in enumerate(items):
            if item.id == record_id:
                removed = items.pop(index)
                collection.write(items)
                break
        else:
            raise ContentNotFoundError(collection.kind, record_id)

    log.info("content_deleted", kind=collection.kind, id=record_id, slug=removed.slug)
    return removed


def get_record(collection: JsonCollection[T], record_id: str) -> T:
    for item in collection.read():
        if item.id == record_id:
            return item
    raise ContentNotFoundError(collection.kind, record_id)
