"""
Pydantic schemas for content endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PageContentRequest(BaseModel):
    content: str = Field(..., min_length=1)
    title: str | None = Field(None, max_length=255)
