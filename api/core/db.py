"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Driver errors are logged here and re-raised as `PersistenceError`, so
callers only ever see the shared error taxonomy.
"""

from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg

from . import settings
from .errors import PersistenceError

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    """
    DATABASE_URL wins; otherwise the DSN is assembled from DB_HOST/DB_PORT/...
    """
    url = os.environ.get("DATABASE_URL", "").strip()
    if url:
        return _sanitize_database_url(url)

    credentials = quote(settings.db_user(), safe="")
    password = settings.db_password()
    if password:
        credentials += ":" + quote(password, safe="")
    return f"postgresql://{credentials}@{settings.db_host()}:{settings.db_port()}/{settings.db_name()}"


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=settings.db_pool_min(),
        max_size=settings.db_pool_max(),
        command_timeout=settings.db_command_timeout(),
    )
    logger.info("db_pool_ready max_size=%s", settings.db_pool_max())


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def _persistence_error(exc: Exception, sql: str) -> PersistenceError:
    logger.error("query_failed error=%s sql=%s", exc, " ".join(sql.split())[:200])
    if isinstance(exc, asyncpg.UniqueViolationError):
        return PersistenceError("A record with the same unique value already exists.")
    if isinstance(exc, asyncpg.IntegrityConstraintViolationError):
        return PersistenceError("The record violates a database constraint.")
    return PersistenceError()


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    try:
        row = await pool().fetchrow(sql, *args)
    except (asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
        raise _persistence_error(exc, sql) from exc
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    try:
        rows = await pool().fetch(sql, *args)
    except (asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
        raise _persistence_error(exc, sql) from exc
    return [_record_to_dict(r) for r in rows]


async def fetch_value(sql: str, *args: Any) -> Any:
    try:
        return await pool().fetchval(sql, *args)
    except (asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
        raise _persistence_error(exc, sql) from exc
