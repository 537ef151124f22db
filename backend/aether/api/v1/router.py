from __future__ import annotations

from fastapi import APIRouter

from .endpoints import export, graph, health, notes, vault

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(vault.router, prefix="/vault", tags=["vault"])
api_router.include_router(notes.router, prefix="/notes", tags=["notes"])
api_router.include_router(graph.router, prefix="/graph", tags=["graph"])
api_router.include_router(export.router, prefix="/export", tags=["export"])
