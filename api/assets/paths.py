"""
Stored asset path shapes.

Canonical form is relative to the public mount: `uploads/<subdir>/<file>`.
Older rows hold `/uploads/...`, `uploads/<file>` without the subdirectory,
or a bare filename; `normalize_asset_path` maps all of them onto the
canonical form at read time.
"""

from __future__ import annotations

PUBLIC_PREFIX = "uploads"


def is_remote(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def canonical_path(subdir: str, filename: str) -> str:
    subdir = subdir.strip("/")
    if not subdir:
        return f"{PUBLIC_PREFIX}/{filename}"
    return f"{PUBLIC_PREFIX}/{subdir}/{filename}"


def normalize_asset_path(value: str | None, subdir: str) -> str | None:
    if value is None:
        return None
    path = str(value).strip().replace("\\", "/")
    if not path:
        return None
    if is_remote(path):
        return path

    path = path.lstrip("/")
    prefix = PUBLIC_PREFIX + "/"
    if not path.startswith(prefix):
        return canonical_path(subdir, path)

    rest = path[len(prefix):]
    if "/" not in rest:
        # uploads/<file> predates per-resource subdirectories
        return canonical_path(subdir, rest)
    return path


def format_file_size(size: int | str | None) -> str:
    if not size:
        return "0MB"
    if isinstance(size, str):
        if size.strip().upper().endswith("MB"):
            return size
        try:
            size = int(size)
        except ValueError:
            return size
    return f"{size / (1024 * 1024):.1f}MB"
