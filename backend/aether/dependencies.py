from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from aether.config import settings
from aether.core.repositories.implementations.local.note_repository import LocalNoteRepository
from aether.core.repositories.implementations.local.storage import (
    FileBlobStorage,
    JsonBlobStorage,
)
from aether.core.repositories.implementations.supabase.note_repository import (
    SupabaseNoteRepository,
)
from aether.core.schemas.auth import Identity
from aether.core.services.export_service import ExportService
from aether.core.services.graph_service import GraphService
from aether.core.services.vault_service import VaultService
from aether.db.base import create_request_supabase_client
from aether.utils.logging import get_logger

logger = get_logger(__name__)

# Missing tokens are fine: they select the local vault
http_bearer = HTTPBearer(auto_error=False)

if TYPE_CHECKING:
    from supabase import Client


async def _run_blocking(func):
    """Run blocking functions in a thread pool."""
    import asyncio
    return await asyncio.to_thread(func)


@lru_cache(maxsize=1)
def get_local_repository() -> LocalNoteRepository:
    """Process-wide local repository built from settings."""
    if settings.local_backend == "blob":
        storage = JsonBlobStorage(settings.vault_dir)
    else:
        storage = FileBlobStorage(settings.vault_dir)
    return LocalNoteRepository(storage)


def get_request_supabase_client(request: Request) -> Client | None:
    """Create a request-scoped Supabase client, or None when the cloud vault is off.

    Extracts the Authorization: Bearer <jwt> header if present and configures
    PostgREST to enforce RLS for the user.
    """
    if not settings.cloud_enabled:
        return None
    auth_header = request.headers.get("authorization") or request.headers.get("Authorization")
    jwt: str | None = None
    if auth_header and auth_header.lower().startswith("bearer "):
        jwt = auth_header.split(" ", 1)[1].strip()
    return create_request_supabase_client(jwt)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
    client: Client | None = Depends(get_request_supabase_client),
) -> Identity | None:
    """Validate the bearer JWT via Supabase; None means "use the local vault"."""
    if not credentials or client is None:
        return None
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token format",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        resp = await _run_blocking(lambda: client.auth.get_user(jwt))
    except Exception as err:
        error_msg = str(err).lower()
        logger.warning(
            "JWT validation failed",
            extra={
                "error_type": type(err).__name__,
                "error_summary": error_msg[:100] if error_msg else "Unknown error",
            }
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is invalid or expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err
    user = getattr(resp, "user", None)
    user_id = getattr(user, "id", None)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user data",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Identity(id=str(user_id), email=getattr(user, "email", None), access_token=jwt)


def get_vault_service(
    local: LocalNoteRepository = Depends(get_local_repository),
    client: Client | None = Depends(get_request_supabase_client),
    identity: Identity | None = Depends(get_current_identity),
) -> VaultService:
    """Get a request-scoped vault service routed by the caller's identity."""
    remote = None
    if client is not None:
        remote = SupabaseNoteRepository(
            client,
            lambda: identity,
            table_name=settings.supabase_notes_table,
        )
    return VaultService(local, remote, lambda: identity, seed=settings.seed_vault)


def get_graph_service(vault: VaultService = Depends(get_vault_service)) -> GraphService:
    return GraphService(vault)


def get_export_service(vault: VaultService = Depends(get_vault_service)) -> ExportService:
    return ExportService(vault)
