"""
FastAPI routers for registry resources.

`build_router(resource)` mounts the CRUD surface under `/api/<name>`:

    GET    /api/<name>                 list (singleton: the one record)
    GET    /api/<name>/slug/{slug}     by slug
    GET    /api/<name>/{id}
    POST   /api/<name>                 JSON or multipart
    PUT    /api/<name>/{id}            JSON or multipart
    DELETE /api/<name>/{id}
    DELETE /api/<name>/{id}/assets     one file of a multi-file slot
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, Query, Request, status

from core import envelope

from . import service
from .forms import read_submission
from .registry import RESOURCES
from .resources import Resource
from .schemas import RemoveAssetRequest

# ids are bigserial; larger values can never match a row
MAX_RECORD_ID = 2**63 - 1

RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]


def build_router(resource: Resource) -> APIRouter:
    router = APIRouter(prefix=f"/api/{resource.name}", tags=[resource.name])
    label = resource.label

    @router.get("")
    async def list_records(
        request: Request,
        search: str | None = Query(None, max_length=200),
        page: int = Query(1, ge=1),
        limit: int = Query(service.DEFAULT_PAGE_SIZE, ge=1, le=service.MAX_PAGE_SIZE),
    ) -> dict:
        if resource.singleton:
            return envelope.ok(await service.get_singleton(resource))

        query = service.ListQuery(
            filters=service.active_filters(resource, request.query_params),
            search=search,
            page=page,
            limit=limit,
        )
        result = await service.list_records(resource, query)
        if isinstance(result, service.Page):
            return envelope.ok(
                result.items,
                pagination=envelope.pagination(page=result.page, limit=result.limit, total=result.total),
            )
        return envelope.ok(result)

    if resource.slug_column:

        @router.get("/slug/{slug}")
        async def get_by_slug(slug: str) -> dict:
            return envelope.ok(await service.get_record_by_slug(resource, slug))

    @router.get("/{record_id}")
    async def get_record(record_id: RecordId) -> dict:
        return envelope.ok(await service.get_record(resource, record_id))

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_record(request: Request) -> dict:
        async with read_submission(request, resource) as submission:
            record = await service.create_record(resource, submission)
        return envelope.ok(record, message=f"{label} created successfully.")

    @router.put("/{record_id}")
    async def update_record(record_id: RecordId, request: Request) -> dict:
        async with read_submission(request, resource) as submission:
            record = await service.update_record(resource, record_id, submission)
        return envelope.ok(record, message=f"{label} updated successfully.")

    @router.delete("/{record_id}")
    async def delete_record(record_id: RecordId) -> dict:
        await service.delete_record(resource, record_id)
        return envelope.ok(message=f"{label} deleted successfully.")

    if resource.multi_slots:

        @router.delete("/{record_id}/assets")
        async def remove_asset(record_id: RecordId, body: RemoveAssetRequest) -> dict:
            record = await service.remove_asset(resource, record_id, body.path, body.slot)
            return envelope.ok(record, message="File removed successfully.")

    return router


def all_routers() -> list[APIRouter]:
    return [build_router(resource) for resource in RESOURCES]
