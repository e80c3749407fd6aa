"""Post request/response schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PostCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)


class PostUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def require_change(self) -> "PostUpdate":
        if self.title is None and self.content is None:
            raise ValueError("title or content is required")
        return self


class PostResponse(BaseModel):
    id: int
    title: str
    content: str
    user_id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    pending: bool = False
