from __future__ import annotations

import asyncio
import io

import pytest
from pypdf import PdfWriter
from starlette.datastructures import UploadFile

from assets import uploads
from core.errors import UploadTooLargeError, ValidationError
from helpers import PNG_BYTES, pdf_bytes


def _upload(data: bytes, filename: str) -> UploadFile:
    return UploadFile(file=io.BytesIO(data), filename=filename)


def test_has_file_ignores_empty_parts():
    assert uploads.has_file(_upload(b"x", "a.png"))
    assert not uploads.has_file(_upload(b"", ""))
    assert not uploads.has_file("a.png")


def test_image_slot_rejects_other_extensions():
    with pytest.raises(ValidationError):
        uploads.validate_upload(_upload(b"x", "notes.txt"), kind="image", slot="image")
    assert uploads.validate_upload(_upload(b"x", "Photo.JPG"), kind="image", slot="image") == ".jpg"


def test_pdf_slot_rejects_images():
    with pytest.raises(ValidationError):
        uploads.validate_upload(_upload(PNG_BYTES, "a.png"), kind="pdf", slot="brochure_file")


def test_read_upload_bytes_enforces_limit():
    with pytest.raises(UploadTooLargeError) as info:
        asyncio.run(uploads.read_upload_bytes(_upload(b"x" * 2048, "a.png"), max_bytes=1024))
    assert info.value.status_code == 413


def test_read_validated_rejects_empty_file():
    with pytest.raises(ValidationError):
        asyncio.run(uploads.read_validated(_upload(b"", "a.png"), kind="image", slot="image"))


def test_valid_pdf_is_accepted():
    assert uploads.validate_pdf(pdf_bytes(pages=2)) == 2


def test_garbage_pdf_is_rejected():
    with pytest.raises(ValidationError):
        uploads.validate_pdf(b"this is not a pdf")


def test_encrypted_pdf_is_rejected():
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    writer.encrypt("secret")
    buf = io.BytesIO()
    writer.write(buf)

    with pytest.raises(ValidationError, match="Encrypted"):
        uploads.validate_pdf(buf.getvalue())


def test_image_limit_comes_from_environment(monkeypatch):
    monkeypatch.setenv("MAX_IMAGE_BYTES", "10")
    with pytest.raises(UploadTooLargeError):
        asyncio.run(uploads.read_validated(_upload(PNG_BYTES, "a.png"), kind="image", slot="image"))
