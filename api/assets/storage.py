"""
Local file storage for record assets.

Writes go through a staging directory so a database row and its files can
be kept consistent:

    stage()   -> bytes land in <root>/.staging/
    commit()  -> os.replace() into <root>/<subdir>/ once the row is written
    discard() -> staging files removed when the row write failed

`os.replace` is atomic because staging lives on the same filesystem as the
final directories.
"""

from __future__ import annotations

import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import anyio
from starlette.datastructures import UploadFile

from core.errors import StorageError

from . import paths, uploads

logger = logging.getLogger(__name__)

STAGING_DIR = ".staging"


@dataclass(frozen=True)
class StagedAsset:
    slot: str
    staging_path: Path
    final_path: Path
    stored_path: str
    original_name: str
    size_bytes: int


def new_filename(slot: str, ext: str) -> str:
    """
    `<slot>-<epoch ms>-<9 random digits><ext>`; unique enough for concurrent
    uploads into the same directory.
    """
    stamp = int(time.time() * 1000)
    suffix = secrets.randbelow(10**9)
    return f"{slot}-{stamp}-{suffix:09d}{ext}"


class AssetStore:
    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()
        self.staging = self.root / STAGING_DIR

    def ensure_directories(self, subdirs: Iterable[str]) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self.staging.mkdir(exist_ok=True)
            for subdir in subdirs:
                (self.root / subdir).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("upload_dirs_failed root=%s error=%s", self.root, exc)
            raise StorageError("Could not create upload directories.") from exc

    def resolve(self, stored_path: str | None, subdir: str = "") -> Path | None:
        """
        Map a stored path (any legacy shape) to a file under the root.
        Remote URLs and paths escaping the root resolve to None.
        """
        normalized = paths.normalize_asset_path(stored_path, subdir)
        if normalized is None or paths.is_remote(normalized):
            return None
        relative = normalized[len(paths.PUBLIC_PREFIX) + 1:]
        candidate = (self.root / relative).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            logger.warning("asset_path_outside_root path=%s", stored_path)
            return None
        return candidate

    async def stage(self, upload: UploadFile, *, kind: str, slot: str, subdir: str) -> StagedAsset:
        ext, data = await uploads.read_validated(upload, kind=kind, slot=slot)
        filename = new_filename(slot, ext)
        staging_path = self.staging / filename
        try:
            await anyio.to_thread.run_sync(staging_path.write_bytes, data)
        except OSError as exc:
            logger.error("asset_stage_failed slot=%s error=%s", slot, exc)
            raise StorageError("Could not save uploaded file.") from exc

        return StagedAsset(
            slot=slot,
            staging_path=staging_path,
            final_path=self.root / subdir / filename,
            stored_path=paths.canonical_path(subdir, filename),
            original_name=upload.filename or filename,
            size_bytes=len(data),
        )

    def commit(self, staged: list[StagedAsset]) -> None:
        """
        Move staged files into place. All or nothing: on failure the files
        already moved go back to staging and StorageError is raised.
        """
        moved: list[StagedAsset] = []
        try:
            for asset in staged:
                asset.final_path.parent.mkdir(parents=True, exist_ok=True)
                os.replace(asset.staging_path, asset.final_path)
                moved.append(asset)
        except OSError as exc:
            logger.error("asset_commit_failed path=%s error=%s", asset.final_path, exc)
            for done in moved:
                try:
                    os.replace(done.final_path, done.staging_path)
                except OSError as undo_exc:
                    logger.error("asset_commit_undo_failed path=%s error=%s", done.final_path, undo_exc)
            raise StorageError("Could not move uploaded file into place.") from exc

    def discard(self, staged: list[StagedAsset]) -> None:
        for asset in staged:
            try:
                asset.staging_path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("asset_discard_failed path=%s error=%s", asset.staging_path, exc)

    def remove(self, stored_path: str | None, subdir: str = "") -> bool:
        """
        Best-effort delete. Returns True when a file was removed.
        """
        target = self.resolve(stored_path, subdir)
        if target is None or not target.is_file():
            return False
        try:
            target.unlink()
        except OSError as exc:
            logger.warning("asset_cleanup_failed path=%s error=%s", target, exc)
            return False
        logger.info("asset_removed path=%s", stored_path)
        return True


_store: AssetStore | None = None


def init_store(root: Path, subdirs: Iterable[str] = ()) -> AssetStore:
    """
    Create the upload root, staging and resource directories once at startup.
    """
    global _store
    store_ = AssetStore(root)
    store_.ensure_directories(subdirs)
    _store = store_
    logger.info("asset_store_ready root=%s", store_.root)
    return store_


def store() -> AssetStore:
    if _store is None:
        raise RuntimeError("Asset store is not initialized. Call init_store() on startup.")
    return _store
