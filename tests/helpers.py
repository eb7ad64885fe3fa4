"""
Small builders and disk probes shared by the test modules.
"""

from __future__ import annotations

import io
from pathlib import Path

from pypdf import PdfWriter

from assets import storage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def stored_files(root: Path) -> list[Path]:
    """Every committed file under the upload root (staging excluded)."""
    return sorted(
        p for p in root.rglob("*") if p.is_file() and storage.STAGING_DIR not in p.relative_to(root).parts
    )


def staged_files(root: Path) -> list[Path]:
    return sorted(p for p in (root / storage.STAGING_DIR).iterdir() if p.is_file())


def on_disk(root: Path, stored_path: str) -> Path:
    return root / stored_path.split("/", 1)[1]


def png(name: str = "photo.png") -> tuple[str, bytes, str]:
    return (name, PNG_BYTES, "image/png")


def pdf_bytes(pages: int = 1) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=72, height=72)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()
