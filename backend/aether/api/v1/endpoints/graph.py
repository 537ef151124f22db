from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from fastapi import APIRouter, Depends

from aether.core.schemas.graph import GraphData
from aether.dependencies import get_graph_service

if TYPE_CHECKING:
    from aether.core.services.graph_service import GraphService

router = APIRouter()


@router.get("/", response_model=GraphData)
async def get_graph(
    mode: Literal["tags", "notes"] = "tags",
    service: GraphService = Depends(get_graph_service),
) -> GraphData:
    """Return the tag co-occurrence graph, or the wiki-link graph with ``mode=notes``."""
    if mode == "notes":
        return await service.build_note_graph()
    return await service.build_graph()
