from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from aether.config import settings
from aether.db.base import create_request_supabase_client
from aether.dependencies import get_local_repository

router = APIRouter()


@router.get("/")
async def health_check():
    """Health check endpoint."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "service": "aether-vault-api",
            "version": "0.1.0"
        }
    )


@router.get("/ready")
async def readiness_check(local=Depends(get_local_repository)):
    """Readiness check endpoint."""
    local_status = "ready" if await asyncio.to_thread(local.storage.exists) else "not initialized"

    cloud_status = "disabled"
    if settings.cloud_enabled:
        cloud_status = "connected"
        try:
            client = create_request_supabase_client()
            await asyncio.to_thread(
                lambda: client.table(settings.supabase_notes_table).select("id").limit(1).execute()
            )
        except Exception as e:
            cloud_status = f"error: {str(e)}"

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ready",
            "local_vault": local_status,
            "cloud_vault": cloud_status,
            "local_backend": settings.local_backend,
            "api_prefix": settings.api_prefix
        }
    )
