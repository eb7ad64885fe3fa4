"""
SQL for rich-text pages keyed by slug.
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_pages() -> list[dict[str, Any]]:
    return await db.fetch_all("SELECT * FROM pages ORDER BY slug ASC")


async def get_page(slug: str) -> dict[str, Any] | None:
    return await db.fetch_one("SELECT * FROM pages WHERE slug = $1", slug)


async def upsert_page(slug: str, *, content: str, title: str | None) -> tuple[dict[str, Any], bool]:
    """
    Returns (row, created). A null title keeps the stored one.
    """
    row = await db.fetch_one(
        """
        INSERT INTO pages (slug, title, content)
        VALUES ($1, $2, $3)
        ON CONFLICT (slug) DO UPDATE
        SET content = EXCLUDED.content,
            title = COALESCE(EXCLUDED.title, pages.title),
            updated_at = now()
        RETURNING *, (xmax = 0) AS inserted
        """,
        slug,
        title,
        content,
    )
    if row is None:
        raise RuntimeError("Failed to save page.")
    created = bool(row.pop("inserted"))
    return row, created


async def delete_page(slug: str) -> dict[str, Any] | None:
    return await db.fetch_one("DELETE FROM pages WHERE slug = $1 RETURNING *", slug)
