"""
Shared fixtures: an in-memory stand-in for `records.repository`, an asset
store under tmp_path and a TestClient on the app (no lifespan, no Postgres).
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import pytest
from fastapi.testclient import TestClient

import main
from assets import storage
from core.errors import PersistenceError
from records import registry, repository
from records.resources import Resource

REPOSITORY_FUNCTIONS = (
    "insert_record",
    "fetch_record",
    "find_record",
    "first_record",
    "update_record",
    "delete_record",
    "list_records",
    "count_records",
    "distinct_values",
)


class FakeRepository:
    """
    Rows per table, with jsonb columns stored as JSON text the way asyncpg
    returns them.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict[int, dict[str, Any]]] = {}
        self._next_id = 1
        self.fail_writes = False

    def rows(self, resource: Resource) -> dict[int, dict[str, Any]]:
        return self.tables.setdefault(resource.table, {})

    def seed(self, resource: Resource, **values: Any) -> dict[str, Any]:
        row = self._new_row(resource, values)
        return dict(row)

    def _encode(self, resource: Resource, values: Mapping[str, Any]) -> dict[str, Any]:
        encoded: dict[str, Any] = {}
        for column, value in values.items():
            if column in resource.json_columns and value is not None and not isinstance(value, str):
                value = json.dumps(value, default=str)
            encoded[column] = value
        return encoded

    def _new_row(self, resource: Resource, values: Mapping[str, Any]) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        row: dict[str, Any] = {"id": self._next_id}
        row.update({column: None for column in resource.columns})
        row.update(self._encode(resource, values))
        row["created_at"] = now
        row["updated_at"] = now
        self.rows(resource)[self._next_id] = row
        self._next_id += 1
        return row

    def _check_writable(self) -> None:
        if self.fail_writes:
            raise PersistenceError()

    def _matches(self, resource: Resource, row: Mapping[str, Any], filters, search) -> bool:
        for column, value in (filters or {}).items():
            if row.get(column) != value:
                return False
        if search and resource.search:
            needle = search.lower()
            return any(needle in str(row.get(column) or "").lower() for column in resource.search)
        return True

    def _ordered(self, resource: Resource) -> list[dict[str, Any]]:
        rows = list(self.rows(resource).values())
        if resource.order_by.startswith("sort_order"):
            return sorted(rows, key=lambda r: (r.get("sort_order") or 0, r["id"]))
        if resource.order_by.startswith("id ASC"):
            return sorted(rows, key=lambda r: r["id"])
        return sorted(rows, key=lambda r: r["id"], reverse=True)

    async def insert_record(self, resource: Resource, values: Mapping[str, Any]) -> dict[str, Any]:
        self._check_writable()
        return dict(self._new_row(resource, values))

    async def fetch_record(self, resource: Resource, record_id: int) -> dict[str, Any] | None:
        row = self.rows(resource).get(record_id)
        return dict(row) if row is not None else None

    async def find_record(self, resource: Resource, criteria: Mapping[str, Any]) -> dict[str, Any] | None:
        for row in sorted(self.rows(resource).values(), key=lambda r: r["id"], reverse=True):
            if self._matches(resource, row, criteria, None):
                return dict(row)
        return None

    async def first_record(self, resource: Resource) -> dict[str, Any] | None:
        rows = sorted(self.rows(resource).values(), key=lambda r: r["id"])
        return dict(rows[0]) if rows else None

    async def update_record(
        self, resource: Resource, record_id: int, values: Mapping[str, Any]
    ) -> dict[str, Any] | None:
        self._check_writable()
        row = self.rows(resource).get(record_id)
        if row is None:
            return None
        row.update(self._encode(resource, {k: v for k, v in values.items() if k in resource.columns}))
        row["updated_at"] = datetime.now(timezone.utc)
        return dict(row)

    async def delete_record(self, resource: Resource, record_id: int) -> dict[str, Any] | None:
        self._check_writable()
        row = self.rows(resource).pop(record_id, None)
        return dict(row) if row is not None else None

    async def list_records(
        self,
        resource: Resource,
        *,
        filters: Mapping[str, Any] | None = None,
        search: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        rows = [dict(r) for r in self._ordered(resource) if self._matches(resource, r, filters, search)]
        if limit is not None:
            rows = rows[offset : offset + limit]
        return rows

    async def count_records(
        self,
        resource: Resource,
        *,
        filters: Mapping[str, Any] | None = None,
        search: str | None = None,
    ) -> int:
        return len([r for r in self.rows(resource).values() if self._matches(resource, r, filters, search)])

    async def distinct_values(self, resource: Resource, column: str) -> list[Any]:
        values = {r.get(column) for r in self.rows(resource).values()}
        return sorted(v for v in values if v not in (None, ""))


@pytest.fixture
def fake_repo(monkeypatch: pytest.MonkeyPatch) -> FakeRepository:
    fake = FakeRepository()
    for name in REPOSITORY_FUNCTIONS:
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def upload_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(storage, "_store", None)
    store = storage.init_store(tmp_path / "uploads", registry.upload_subdirs())
    return store.root


@pytest.fixture
def client(fake_repo: FakeRepository, upload_root: Path) -> TestClient:
    return TestClient(main.app)
