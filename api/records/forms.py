"""
Reading a create/update submission from the request body.

Resources with files are posted as multipart/form-data; the enquiry forms
post JSON. Both end up as the same `Submission`.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

from fastapi import Request
from starlette.datastructures import UploadFile

from assets.uploads import has_file
from core.errors import ValidationError

from .resources import Resource


@dataclass
class Submission:
    values: dict[str, Any] = field(default_factory=dict)
    files: dict[str, list[UploadFile]] = field(default_factory=dict)

    def files_for(self, slot_name: str) -> list[UploadFile]:
        return self.files.get(slot_name, [])


def _list_keys(resource: Resource) -> set[str]:
    keys: set[str] = set()
    for f in resource.fields:
        if f.is_json:
            keys.add(f.name)
            if f.alias:
                keys.add(f.alias)
    keys.update(slot.keep_param for slot in resource.multi_slots)
    return keys


def _is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == "application/json"


async def _json_submission(request: Request) -> Submission:
    raw = await request.body()
    if not raw.strip():
        return Submission()
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise ValidationError("Request body is not valid JSON.") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return Submission(values=payload)


@asynccontextmanager
async def read_submission(request: Request, resource: Resource) -> AsyncIterator[Submission]:
    """
    Yield the parsed submission. Multipart uploads stay readable until the
    block exits, then their spooled temp files are closed.
    """
    if _is_json(request):
        yield await _json_submission(request)
        return

    slot_names = {slot.name for slot in resource.slots}
    list_keys = _list_keys(resource)

    async with request.form() as form:
        submission = Submission()
        for key in set(form.keys()):
            items = form.getlist(key)
            uploads = [item for item in items if has_file(item)]
            texts = [item for item in items if isinstance(item, str)]

            if key in slot_names:
                if uploads:
                    submission.files[key] = uploads
                continue
            if uploads:
                raise ValidationError(f"Unexpected file field '{key}'.")
            if key in list_keys and len(texts) > 1:
                submission.values[key] = texts
            elif texts:
                submission.values[key] = texts[0]
        yield submission
