"""
FastAPI router for content endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from core import envelope

from . import repository, service
from .schemas import PageContentRequest

router = APIRouter(prefix="/api", tags=["content"])


@router.get("/pages")
async def list_pages() -> dict:
    return envelope.ok(await repository.list_pages())


@router.get("/pages/{slug}")
async def get_page(slug: str) -> dict:
    return envelope.ok(await service.get_page(slug))


@router.put("/pages/{slug}")
async def save_page(slug: str, payload: PageContentRequest, response: Response) -> dict:
    """
    Create the page on first save, replace its content afterwards.
    """
    page, created = await service.save_page(slug, content=payload.content, title=payload.title)
    if created:
        response.status_code = status.HTTP_201_CREATED
        return envelope.ok(page, message="Page created successfully.")
    return envelope.ok(page, message="Page updated successfully.")


@router.delete("/pages/{slug}")
async def delete_page(slug: str) -> dict:
    await service.delete_page(slug)
    return envelope.ok(message="Page deleted successfully.")


@router.get("/topnavbar")
async def top_navbar() -> dict:
    return envelope.ok(await service.top_navbar())


@router.get("/faq-categories")
async def faq_categories() -> dict:
    return envelope.ok(await service.faq_categories())


@router.get("/detailed-locations/{location_type}/{slug}")
async def location_page(location_type: str, slug: str) -> dict:
    return envelope.ok(await service.location_page(location_type, slug))
