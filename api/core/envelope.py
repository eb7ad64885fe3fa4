"""
The response envelope used by every route:

    {"success": bool, "message"?: str, "data"?: ..., "error"?: str,
     "pagination"?: {...}}
"""

from __future__ import annotations

from typing import Any


def ok(data: Any = None, *, message: str | None = None, pagination: dict | None = None) -> dict:
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    return body


def failure(message: str, *, error: str | None = None) -> dict:
    body: dict[str, Any] = {"success": False, "message": message}
    if error:
        body["error"] = error
    return body


def pagination(*, page: int, limit: int, total: int) -> dict:
    total_pages = (total + limit - 1) // limit if limit > 0 else 0
    return {"page": page, "limit": limit, "total": total, "total_pages": total_pages}
