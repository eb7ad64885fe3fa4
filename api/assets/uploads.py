"""
Upload validation.

This file contains logic that is independent of FastAPI's routing layer:
- Validate uploads by extension
- Read file bytes with a size limit
- Check that PDF documents actually open
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from pypdf import PdfReader
from starlette.datastructures import UploadFile

from core import settings
from core.errors import UploadTooLargeError, ValidationError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".avif"}
PDF_EXTENSIONS = {".pdf"}

ALLOWED_EXTENSIONS = {
    "image": IMAGE_EXTENSIONS,
    "pdf": PDF_EXTENSIONS,
}


def has_file(value: object) -> bool:
    """
    Browsers send an empty part for untouched file inputs; treat it as absent.
    """
    return isinstance(value, UploadFile) and bool(value.filename)


def file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def validate_upload(upload: UploadFile, *, kind: str, slot: str) -> str:
    """
    Return the normalized file extension if this upload is acceptable.

    We validate based on filename extension because `content_type`
    is often missing or incorrect in practice.
    """
    if not upload.filename:
        raise ValidationError(f"Missing filename for '{slot}'.")

    ext = file_ext(upload.filename)
    allowed = ALLOWED_EXTENSIONS[kind]
    if ext not in allowed:
        raise ValidationError(
            f"Unsupported file type '{ext}' for '{slot}'. Allowed: {sorted(allowed)}"
        )
    return ext


def max_bytes_for(kind: str) -> int:
    if kind == "pdf":
        return settings.max_document_bytes()
    return settings.max_image_bytes()


async def read_upload_bytes(upload: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await upload.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise UploadTooLargeError(f"File too large. Max is {max_bytes} bytes.")

    return bytes(buf)


def validate_pdf(data: bytes) -> int:
    """
    Make sure a brochure opens as a PDF; returns its page count.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        encrypted = reader.is_encrypted
        pages = 0 if encrypted else len(reader.pages)
    except Exception as exc:
        # pypdf raises many different error types on malformed input
        logger.info("pdf_rejected error=%s", exc)
        raise ValidationError("Could not read PDF (file may be corrupted or unsupported).") from exc

    if encrypted:
        raise ValidationError("Encrypted PDF is not supported.")
    if pages == 0:
        raise ValidationError("PDF has no pages.")
    return pages


async def read_validated(upload: UploadFile, *, kind: str, slot: str) -> tuple[str, bytes]:
    """
    Validate one upload for a slot and return (extension, bytes).
    """
    ext = validate_upload(upload, kind=kind, slot=slot)
    data = await read_upload_bytes(upload, max_bytes=max_bytes_for(kind))
    if not data:
        raise ValidationError(f"Uploaded file for '{slot}' is empty.")
    if kind == "pdf":
        validate_pdf(data)
    return ext, data
