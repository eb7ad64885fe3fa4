from __future__ import annotations

import asyncio
import io
import os

import pytest
from starlette.datastructures import UploadFile

from assets import storage
from assets.storage import AssetStore
from core.errors import StorageError
from helpers import PNG_BYTES, staged_files, stored_files


@pytest.fixture
def store(tmp_path) -> AssetStore:
    s = AssetStore(tmp_path / "uploads")
    s.ensure_directories(["cars", "gallery"])
    return s


def _stage(store: AssetStore, name: str = "a.png", subdir: str = "cars"):
    upload = UploadFile(file=io.BytesIO(PNG_BYTES), filename=name)
    return asyncio.run(store.stage(upload, kind="image", slot="image", subdir=subdir))


def test_new_filename_shape():
    name = storage.new_filename("feature_image", ".png")
    slot, stamp, suffix = name[: -len(".png")].rsplit("-", 2)
    assert slot == "feature_image"
    assert stamp.isdigit()
    assert len(suffix) == 9 and suffix.isdigit()


def test_stage_writes_to_staging_only(store):
    staged = _stage(store)

    assert staged.staging_path.is_file()
    assert not staged.final_path.exists()
    assert staged.stored_path.startswith("uploads/cars/image-")
    assert staged.original_name == "a.png"
    assert staged.size_bytes == len(PNG_BYTES)


def test_commit_moves_file_into_place(store):
    staged = _stage(store)
    store.commit([staged])

    assert staged.final_path.read_bytes() == PNG_BYTES
    assert staged_files(store.root) == []
    assert store.resolve(staged.stored_path, "cars") == staged.final_path.resolve()


def test_commit_failure_puts_moved_files_back(store, monkeypatch):
    first, second = _stage(store, "a.png"), _stage(store, "b.png")
    real_replace = os.replace
    calls = {"n": 0}

    def flaky_replace(src, dst):
        calls["n"] += 1
        if calls["n"] == 2:
            raise OSError("disk full")
        return real_replace(src, dst)

    monkeypatch.setattr(storage.os, "replace", flaky_replace)
    with pytest.raises(StorageError):
        store.commit([first, second])

    assert stored_files(store.root) == []
    assert first.staging_path.is_file()
    assert second.staging_path.is_file()


def test_discard_removes_staged_files(store):
    staged = _stage(store)
    store.discard([staged])
    assert staged_files(store.root) == []


def test_remove_is_best_effort(store):
    staged = _stage(store)
    store.commit([staged])

    assert store.remove(staged.stored_path, "cars") is True
    assert store.remove(staged.stored_path, "cars") is False
    assert store.remove(None) is False
    assert store.remove("https://cdn.example.com/a.png") is False


def test_remove_understands_legacy_paths(store):
    staged = _stage(store)
    store.commit([staged])
    filename = staged.final_path.name

    assert store.remove(f"/uploads/{filename}", "cars") is True
    assert not staged.final_path.exists()


def test_resolve_refuses_paths_outside_root(store):
    assert store.resolve("uploads/../../etc/passwd", "cars") is None


def test_init_store_creates_directories(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "_store", None)
    created = storage.init_store(tmp_path / "files", ["locations/main", "ebrochures"])

    assert (created.root / "locations" / "main").is_dir()
    assert (created.root / "ebrochures").is_dir()
    assert (created.root / storage.STAGING_DIR).is_dir()
    assert storage.store() is created


def test_file_moves_run_off_the_event_loop(client, monkeypatch):
    real_replace = os.replace
    callers = []

    def tracking_replace(src, dst):
        try:
            asyncio.get_running_loop()
            callers.append("event-loop")
        except RuntimeError:
            callers.append("worker")
        real_replace(src, dst)

    monkeypatch.setattr(storage.os, "replace", tracking_replace)

    resp = client.post("/api/car-logos", data={"name": "Kia"}, files={"image": ("k.png", PNG_BYTES, "image/png")})

    assert resp.status_code == 201
    assert callers == ["worker"]
