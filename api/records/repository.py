"""
Generic persistence for registry resources.

Identifiers (table/column names) come from `records.resources` definitions;
every user-supplied value is a positional parameter.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from core import db

from .resources import Resource


def _json_arg(value: Any) -> str | None:
    """
    asyncpg does not automatically encode Python lists/dicts for jsonb
    parameters. We pass JSON as a string and cast to jsonb in SQL.
    """
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=True, default=str)


def _bind(resource: Resource, column: str, value: Any, index: int) -> tuple[str, Any]:
    if column in resource.json_columns:
        return f"${index}::jsonb", _json_arg(value)
    return f"${index}", value


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _where(
    resource: Resource,
    filters: Mapping[str, Any] | None,
    search: str | None,
    start: int = 1,
) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    args: list[Any] = []

    for column, value in (filters or {}).items():
        args.append(value)
        clauses.append(f"{column} = ${start + len(args) - 1}")

    if search and resource.search:
        args.append(f"%{_escape_like(search)}%")
        idx = start + len(args) - 1
        ors = " OR ".join(f"{column}::text ILIKE ${idx}" for column in resource.search)
        clauses.append(f"({ors})")

    if not clauses:
        return "", args
    return "WHERE " + " AND ".join(clauses), args


async def insert_record(resource: Resource, values: Mapping[str, Any]) -> dict[str, Any]:
    columns = [c for c in resource.columns if c in values]
    placeholders: list[str] = []
    args: list[Any] = []
    for i, column in enumerate(columns, start=1):
        placeholder, arg = _bind(resource, column, values[column], i)
        placeholders.append(placeholder)
        args.append(arg)

    if columns:
        sql = f"""
            INSERT INTO {resource.table} ({", ".join(columns)})
            VALUES ({", ".join(placeholders)})
            RETURNING *
        """
    else:
        sql = f"INSERT INTO {resource.table} DEFAULT VALUES RETURNING *"

    row = await db.fetch_one(sql, *args)
    if row is None:
        raise RuntimeError(f"Failed to insert into {resource.table}.")
    return row


async def fetch_record(resource: Resource, record_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(f"SELECT * FROM {resource.table} WHERE id = $1", record_id)


async def find_record(resource: Resource, criteria: Mapping[str, Any]) -> dict[str, Any] | None:
    where, args = _where(resource, criteria, None)
    return await db.fetch_one(
        f"SELECT * FROM {resource.table} {where} ORDER BY id DESC LIMIT 1",
        *args,
    )


async def first_record(resource: Resource) -> dict[str, Any] | None:
    return await db.fetch_one(f"SELECT * FROM {resource.table} ORDER BY id ASC LIMIT 1")


async def update_record(
    resource: Resource,
    record_id: int,
    values: Mapping[str, Any],
) -> dict[str, Any] | None:
    """
    Returns the updated row, or None when the id no longer exists.
    """
    assignments: list[str] = []
    args: list[Any] = []
    for column in resource.columns:
        if column not in values:
            continue
        placeholder, arg = _bind(resource, column, values[column], len(args) + 1)
        assignments.append(f"{column} = {placeholder}")
        args.append(arg)

    assignments.append("updated_at = now()")
    args.append(record_id)
    return await db.fetch_one(
        f"""
        UPDATE {resource.table}
        SET {", ".join(assignments)}
        WHERE id = ${len(args)}
        RETURNING *
        """,
        *args,
    )


async def delete_record(resource: Resource, record_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"DELETE FROM {resource.table} WHERE id = $1 RETURNING *",
        record_id,
    )


async def list_records(
    resource: Resource,
    *,
    filters: Mapping[str, Any] | None = None,
    search: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[dict[str, Any]]:
    where, args = _where(resource, filters, search)
    sql = f"SELECT * FROM {resource.table} {where} ORDER BY {resource.order_by}"
    if limit is not None:
        args.extend([limit, offset])
        sql += f" LIMIT ${len(args) - 1} OFFSET ${len(args)}"
    return await db.fetch_all(sql, *args)


async def count_records(
    resource: Resource,
    *,
    filters: Mapping[str, Any] | None = None,
    search: str | None = None,
) -> int:
    where, args = _where(resource, filters, search)
    value = await db.fetch_value(f"SELECT count(*) FROM {resource.table} {where}", *args)
    return int(value or 0)


async def distinct_values(resource: Resource, column: str) -> list[Any]:
    rows = await db.fetch_all(
        f"""
        SELECT DISTINCT {column} AS value
        FROM {resource.table}
        WHERE {column} IS NOT NULL
          AND {column}::text <> ''
        ORDER BY {column} ASC
        """
    )
    return [row["value"] for row in rows]
