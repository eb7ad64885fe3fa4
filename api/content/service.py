"""
Content lookups built on the generic record queries.
"""

from __future__ import annotations

import logging
from typing import Any

from core.errors import NotFoundError
from records import registry
from records import repository as records_repository
from records import service as records_service

from . import repository

logger = logging.getLogger(__name__)


async def get_page(slug: str) -> dict[str, Any]:
    row = await repository.get_page(slug)
    if row is None:
        raise NotFoundError("Page not found.")
    return row


async def save_page(slug: str, *, content: str, title: str | None = None) -> tuple[dict[str, Any], bool]:
    row, created = await repository.upsert_page(slug, content=content, title=title)
    logger.info("page_saved slug=%s created=%s", slug, created)
    return row, created


async def delete_page(slug: str) -> None:
    if await repository.delete_page(slug) is None:
        raise NotFoundError("Page not found.")
    logger.info("page_deleted slug=%s", slug)


async def top_navbar() -> dict[str, Any]:
    """
    Contact row of the top bar plus the social icons next to it.
    """
    navbar = await records_repository.first_record(registry.get("top-navbar"))
    icons = await records_service.list_records(registry.get("social-icons"), records_service.ListQuery())
    return {"navbarInfo": navbar or {}, "icons": icons}


async def faq_categories() -> list[Any]:
    return await records_repository.distinct_values(registry.get("faq"), "category")


async def location_page(location_type: str, slug: str) -> dict[str, Any]:
    return await records_service.find_record(
        registry.get("detailed-locations"),
        {"type": location_type, "slug": slug},
    )
