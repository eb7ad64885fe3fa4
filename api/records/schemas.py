"""
Pydantic schemas for record endpoints with a fixed body shape.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field


class RemoveAssetRequest(BaseModel):
    # gallery admin screens post `imageUrl`
    path: str | None = Field(None, validation_alias=AliasChoices("path", "imageUrl", "image_url"))
    slot: str | None = None
