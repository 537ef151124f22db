from __future__ import annotations

from pydantic import Field

from aether.core.models.base import AppBaseModel


class GraphNode(AppBaseModel):
    """A tag (tag mode) or a note (note mode) in the vault graph."""

    id: str = Field(..., description="Tag name or note id")
    label: str = Field(..., description="Display label")
    frequency: int = Field(default=0, description="Notes carrying the tag, or notes linking here")
    backlinks: list[str] = Field(default_factory=list, description="Adjacent node ids")


class GraphLink(AppBaseModel):
    """An edge between two node ids."""

    source: str
    target: str


class GraphData(AppBaseModel):
    """The top-level payload consumed by the graph view."""

    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphLink] = Field(default_factory=list)
