from __future__ import annotations

from pydantic import Field, computed_field

from aether.utils.markdown import extract_tags

from .base import AppBaseModel


class NoteMetadata(AppBaseModel):
    """Per-note metadata stored in the envelope line of a local record.

    Serialized with camelCase aliases so the envelope stays readable by other clients
    of the same vault. Every field is optional: an empty instance means "unknown".
    """

    created_at: int | None = Field(default=None, alias="createdAt", description="Creation time (ms)")
    updated_at: int | None = Field(default=None, alias="updatedAt", description="Last save time (ms)")
    is_archived: bool | None = Field(default=None, alias="isArchived")


class Note(AppBaseModel):
    """Note domain model as returned by every store."""

    id: str = Field(..., description="Stable key derived from the title (see slugify)")
    title: str = Field(..., description="Display title")
    body: str = Field(default="", description="Markdown body without envelope or heading")
    links: list[str] = Field(default_factory=list, description="Outgoing [[wiki-link]] targets")
    backlinks: list[str] = Field(default_factory=list, description="Filled only by graph building")
    created_at: int | None = Field(default=None, description="Creation time (ms since epoch)")
    updated_at: int | None = Field(default=None, description="Last save time (ms since epoch)")
    is_archived: bool = Field(default=False, description="Whether note is archived")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def tags(self) -> list[str]:
        """Hashtags found in the body, sorted for stable output."""
        return sorted(extract_tags(self.body))
