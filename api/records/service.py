"""
Record-with-asset lifecycle.

Create/update/delete keep a row and the files it references consistent:

- create: stage files -> insert row -> move files into place
  (insert fails: staged files discarded; move fails: row deleted again)
- update: stage files -> update row -> move files -> delete replaced files
  (update fails: staged files discarded; move fails: old values restored)
- delete: delete row -> delete its files (best-effort; orphans are logged)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import anyio

from assets import paths
from assets.storage import StagedAsset, store
from core.errors import ApiError, NotFoundError, StorageError, ValidationError

from . import fields, repository
from .forms import Submission
from .resources import AssetSlot, Resource

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
FILTER_WILDCARD_PREFIX = "All "


@dataclass(frozen=True)
class ListQuery:
    filters: dict[str, Any] = field(default_factory=dict)
    search: str | None = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class Page:
    items: list[dict[str, Any]]
    total: int
    page: int
    limit: int


def decode_list(value: Any, *, column: str = "") -> list[Any]:
    """
    jsonb arrays come back from asyncpg as text. Anything undecodable
    becomes an empty list instead of an error.
    """
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            logger.warning("json_column_undecodable column=%s", column)
            return []
        return decoded if isinstance(decoded, list) else []
    return []


def present(resource: Resource, row: Mapping[str, Any]) -> dict[str, Any]:
    """
    Shape a stored row for the API: decoded lists, normalized asset paths.
    """
    data = dict(row)
    for f in resource.fields:
        if f.is_json and f.name in data:
            data[f.name] = decode_list(data[f.name], column=f.name)
    for slot in resource.slots:
        if slot.column not in data:
            continue
        subdir = resource.slot_subdir(slot)
        if slot.multiple:
            items = decode_list(data[slot.column], column=slot.column)
            data[slot.column] = [p for p in (paths.normalize_asset_path(i, subdir) for i in items) if p]
        else:
            data[slot.column] = paths.normalize_asset_path(data[slot.column], subdir)
    if resource.decorate is not None:
        data = resource.decorate(data)
    return data


def _stored_value(resource: Resource, row: Mapping[str, Any], column: str) -> Any:
    value = row.get(column)
    if column in resource.json_columns:
        return decode_list(value, column=column)
    return value


def _apply_slug(resource: Resource, values: dict[str, Any]) -> None:
    column, source = resource.slug_column, resource.slug_source
    if not column or not source or column not in values:
        return None
    if fields.is_blank(values[column]) and not fields.is_blank(values.get(source)):
        values[column] = fields.slugify(str(values[source]))


def _check_file_counts(resource: Resource, submission: Submission, *, creating: bool) -> None:
    missing: list[str] = []
    for slot in resource.slots:
        uploads = submission.files_for(slot.name)
        if len(uploads) > slot.max_count:
            raise ValidationError(f"At most {slot.max_count} file(s) allowed for '{slot.name}'.")
        if creating and slot.required and not uploads:
            missing.append(slot.name)
    if missing:
        raise ValidationError(f"Missing required files: {', '.join(missing)}.")


async def _stage_uploads(resource: Resource, submission: Submission) -> list[StagedAsset]:
    staged: list[StagedAsset] = []
    try:
        for slot in resource.slots:
            for upload in submission.files_for(slot.name):
                staged.append(
                    await store().stage(
                        upload,
                        kind=slot.kind,
                        slot=slot.name,
                        subdir=resource.slot_subdir(slot),
                    )
                )
    except Exception:
        store().discard(staged)
        raise
    return staged


def _staged_for(slot: AssetSlot, staged: list[StagedAsset]) -> list[StagedAsset]:
    return [s for s in staged if s.slot == slot.name]


def _kept_paths(slot: AssetSlot, subdir: str, stored: list[Any], submission: Submission) -> list[str]:
    """
    Stored paths of a multi slot that survive the update. Without an
    explicit `existing_<slot>` list, everything stays.
    """
    normalized = [p for p in (paths.normalize_asset_path(i, subdir) for i in stored) if p]
    if slot.keep_param not in submission.values:
        return normalized
    requested = fields.parse_list(submission.values[slot.keep_param], slot.keep_param)
    wanted = {paths.normalize_asset_path(str(p), subdir) for p in requested}
    return [p for p in normalized if p in wanted]


def _asset_values(
    resource: Resource,
    staged: list[StagedAsset],
    submission: Submission,
    existing: Mapping[str, Any] | None = None,
) -> tuple[dict[str, Any], list[tuple[str, str]]]:
    """
    Column values for the asset slots, plus (path, subdir) pairs that the
    write makes unreferenced.
    """
    values: dict[str, Any] = {}
    released: list[tuple[str, str]] = []

    for slot in resource.slots:
        subdir = resource.slot_subdir(slot)
        new = _staged_for(slot, staged)

        if slot.multiple:
            if existing is None:
                values[slot.column] = [s.stored_path for s in new]
                continue
            stored = decode_list(existing.get(slot.column), column=slot.column)
            if not new and slot.keep_param not in submission.values:
                continue
            kept = _kept_paths(slot, subdir, stored, submission)
            values[slot.column] = kept + [s.stored_path for s in new]
            for old in stored:
                old_path = paths.normalize_asset_path(old, subdir)
                if old_path and old_path not in kept:
                    released.append((old_path, subdir))
            continue

        if not new:
            if existing is None:
                values[slot.column] = None
            continue

        asset = new[0]
        values[slot.column] = asset.stored_path
        if slot.original_name_column:
            values[slot.original_name_column] = asset.original_name
        if slot.size_column:
            values[slot.size_column] = asset.size_bytes
        if existing is not None and existing.get(slot.column):
            released.append((existing[slot.column], subdir))

    return values, released


def _asset_references(resource: Resource, row: Mapping[str, Any]) -> list[tuple[str, str]]:
    refs: list[tuple[str, str]] = []
    for slot in resource.slots:
        subdir = resource.slot_subdir(slot)
        if slot.multiple:
            refs.extend((p, subdir) for p in decode_list(row.get(slot.column), column=slot.column) if p)
        elif row.get(slot.column):
            refs.append((row[slot.column], subdir))
    return refs


def _release(resource: Resource, refs: list[tuple[str, str]]) -> int:
    removed = 0
    for stored_path, subdir in refs:
        if store().remove(stored_path, subdir):
            removed += 1
    return removed


async def create_record(resource: Resource, submission: Submission) -> dict[str, Any]:
    values = fields.build_values(resource, submission.values)
    _apply_slug(resource, values)
    _check_file_counts(resource, submission, creating=True)

    if resource.singleton and await repository.first_record(resource) is not None:
        raise ValidationError(f"{resource.label} already exists; update it instead.")

    staged = await _stage_uploads(resource, submission)
    asset_values, _ = _asset_values(resource, staged, submission)
    values.update(asset_values)

    try:
        row = await repository.insert_record(resource, values)
    except Exception:
        store().discard(staged)
        raise

    try:
        await anyio.to_thread.run_sync(store().commit, staged)
    except StorageError:
        try:
            await repository.delete_record(resource, int(row["id"]))
        except ApiError:
            logger.exception("create_compensation_failed resource=%s id=%s", resource.name, row["id"])
        store().discard(staged)
        raise

    logger.info("record_created resource=%s id=%s files=%s", resource.name, row["id"], len(staged))
    return present(resource, row)


async def update_record(resource: Resource, record_id: int, submission: Submission) -> dict[str, Any]:
    existing = await repository.fetch_record(resource, record_id)
    if existing is None:
        raise NotFoundError(f"{resource.label} not found.")

    values = fields.build_values(resource, submission.values, updating=True)
    _apply_slug(resource, values)
    _check_file_counts(resource, submission, creating=False)

    staged = await _stage_uploads(resource, submission)
    asset_values, released = _asset_values(resource, staged, submission, existing)
    values.update(asset_values)

    try:
        row = await repository.update_record(resource, record_id, values)
    except Exception:
        store().discard(staged)
        raise
    if row is None:
        store().discard(staged)
        raise NotFoundError(f"{resource.label} not found.")

    try:
        await anyio.to_thread.run_sync(store().commit, staged)
    except StorageError:
        previous = {column: _stored_value(resource, existing, column) for column in values}
        try:
            await repository.update_record(resource, record_id, previous)
        except ApiError:
            logger.exception("update_compensation_failed resource=%s id=%s", resource.name, record_id)
        store().discard(staged)
        raise

    removed = await anyio.to_thread.run_sync(_release, resource, released)
    logger.info(
        "record_updated resource=%s id=%s files=%s replaced=%s",
        resource.name,
        record_id,
        len(staged),
        removed,
    )
    return present(resource, row)


async def delete_record(resource: Resource, record_id: int) -> None:
    row = await repository.delete_record(resource, record_id)
    if row is None:
        raise NotFoundError(f"{resource.label} not found.")
    refs = _asset_references(resource, row)
    removed = await anyio.to_thread.run_sync(_release, resource, refs)
    if removed < len(refs):
        logger.info(
            "record_deleted_with_missing_files resource=%s id=%s referenced=%s removed=%s",
            resource.name,
            record_id,
            len(refs),
            removed,
        )
    logger.info("record_deleted resource=%s id=%s", resource.name, record_id)


async def remove_asset(
    resource: Resource,
    record_id: int,
    path: str | None,
    slot_name: str | None = None,
) -> dict[str, Any]:
    """
    Drop one file from a multi-file slot (e.g. one picture of a gallery).
    """
    existing = await repository.fetch_record(resource, record_id)
    if existing is None:
        raise NotFoundError(f"{resource.label} not found.")

    candidates = [s for s in resource.multi_slots if slot_name in (None, s.name)]
    if not candidates:
        raise ValidationError(f"{resource.label} has no multi-file slot named '{slot_name}'.")
    if len(candidates) > 1:
        raise ValidationError("Specify which slot the file belongs to.")
    slot = candidates[0]
    subdir = resource.slot_subdir(slot)

    target = paths.normalize_asset_path(path, subdir)
    if target is None:
        raise ValidationError("Image URL is required.")

    stored = decode_list(existing.get(slot.column), column=slot.column)
    remaining = [p for p in stored if paths.normalize_asset_path(p, subdir) != target]
    if len(remaining) == len(stored):
        raise ValidationError(f"File is not part of this {resource.label.lower()}.")

    row = await repository.update_record(resource, record_id, {slot.column: remaining})
    if row is None:
        raise NotFoundError(f"{resource.label} not found.")
    await anyio.to_thread.run_sync(store().remove, target, subdir)
    return present(resource, row)


async def get_record(resource: Resource, record_id: int) -> dict[str, Any]:
    row = await repository.fetch_record(resource, record_id)
    if row is None:
        raise NotFoundError(f"{resource.label} not found.")
    return present(resource, row)


async def find_record(resource: Resource, criteria: Mapping[str, Any]) -> dict[str, Any]:
    row = await repository.find_record(resource, criteria)
    if row is None:
        raise NotFoundError(f"{resource.label} not found.")
    return present(resource, row)


async def get_record_by_slug(resource: Resource, slug: str) -> dict[str, Any]:
    if not resource.slug_column:
        raise NotFoundError(f"{resource.label} has no slug lookup.")
    return await find_record(resource, {resource.slug_column: slug.strip()})


async def get_singleton(resource: Resource) -> dict[str, Any]:
    row = await repository.first_record(resource)
    if row is None:
        raise NotFoundError(f"{resource.label} not found.")
    return present(resource, row)


def active_filters(resource: Resource, raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Equality filters from query params; "All Models"-style values mean
    "no filter".
    """
    active: dict[str, Any] = {}
    for column in resource.filters:
        value = raw.get(column)
        if fields.is_blank(value) or str(value).startswith(FILTER_WILDCARD_PREFIX):
            continue
        f = resource.field(column)
        active[column] = fields.coerce(f, value) if f is not None else value
    return active


async def list_records(resource: Resource, query: ListQuery) -> Page | list[dict[str, Any]]:
    search = query.search.strip() if query.search else None
    if not resource.paginated:
        rows = await repository.list_records(resource, filters=query.filters, search=search)
        return [present(resource, r) for r in rows]

    limit = min(max(query.limit, 1), MAX_PAGE_SIZE)
    page = max(query.page, 1)
    rows = await repository.list_records(
        resource,
        filters=query.filters,
        search=search,
        limit=limit,
        offset=(page - 1) * limit,
    )
    total = await repository.count_records(resource, filters=query.filters, search=search)
    return Page(items=[present(resource, r) for r in rows], total=total, page=page, limit=limit)
