from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from aether.dependencies import get_export_service

if TYPE_CHECKING:
    from aether.core.services.export_service import ExportService

router = APIRouter()


@router.get("/")
async def export_vault(service: ExportService = Depends(get_export_service)) -> Response:
    """Download every non-archived note as a single markdown document."""
    document = await service.export_markdown()
    filename = service.export_filename()
    return Response(
        content=document,
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
