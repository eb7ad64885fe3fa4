from __future__ import annotations

import asyncpg
import pytest
from fastapi.testclient import TestClient

import main
from core import db
from core.errors import NotFoundError, PersistenceError, StorageError, UploadTooLargeError, ValidationError
from records import repository


def test_error_status_codes():
    assert ValidationError().status_code == 400
    assert UploadTooLargeError().status_code == 413
    assert isinstance(UploadTooLargeError(), ValidationError)
    assert NotFoundError().status_code == 404
    assert StorageError().status_code == 500
    assert PersistenceError().status_code == 500
    assert NotFoundError("Car not found.").message == "Car not found."


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/does-not-exist")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Not Found"}


def test_non_numeric_id_is_a_bad_request(client):
    resp = client.get("/api/faq/abc")

    body = resp.json()
    assert resp.status_code == 400
    assert body["success"] is False
    assert body["message"] == "Invalid request."
    assert "record_id" in body["error"]


def test_method_not_allowed(client):
    resp = client.patch("/api/faq/1")
    assert resp.status_code == 405
    assert resp.json()["success"] is False


def test_driver_error_is_not_echoed(monkeypatch, upload_root):
    class BrokenPool:
        async def fetchrow(self, sql, *args):
            raise asyncpg.UndefinedTableError('relation "faq" does not exist')

    monkeypatch.setattr(db, "_pool", BrokenPool())

    resp = TestClient(main.app).get("/api/faq/1")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Database operation failed."}
    assert "relation" not in resp.text


def test_unique_violation_message():
    exc = asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
    error = db._persistence_error(exc, "INSERT INTO pages ...")

    assert isinstance(error, PersistenceError)
    assert error.message == "A record with the same unique value already exists."


def test_unexpected_error_is_a_generic_500(monkeypatch, fake_repo, upload_root):
    async def explode(resource, record_id):
        raise KeyError("boom")

    monkeypatch.setattr(repository, "fetch_record", explode)

    resp = TestClient(main.app, raise_server_exceptions=False).get("/api/faq/1")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error."}


@pytest.mark.parametrize("path", ["/health", "/"])
def test_service_routes(client, path):
    assert client.get(path).status_code == 200
