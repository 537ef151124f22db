from __future__ import annotations

from pydantic import Field, field_validator

from aether.core.models.base import AppBaseModel


class NoteSave(AppBaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Note title")
    body: str = Field(default="", max_length=100_000, description="Markdown body")
    previous_id: str | None = Field(default=None, description="Id of the note being edited")
    is_archived: bool | None = Field(default=None, description="Archive flag; omitted keeps the current value")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Title must be non-empty")
        return stripped


class NoteRead(AppBaseModel):
    id: str
    title: str
    body: str
    links: list[str]
    backlinks: list[str]
    tags: list[str]
    created_at: int | None
    updated_at: int | None
    is_archived: bool
