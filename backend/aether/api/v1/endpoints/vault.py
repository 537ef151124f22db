from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, status

from aether.dependencies import get_vault_service

if TYPE_CHECKING:
    from aether.core.services.vault_service import VaultService

router = APIRouter()


@router.post("/init")
async def init_vault(service: VaultService = Depends(get_vault_service)) -> dict[str, bool]:
    """Create the local vault if needed. ``created`` is False when it already existed."""
    created = await service.init_vault()
    return {"created": created}


@router.post("/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset_vault(service: VaultService = Depends(get_vault_service)):
    """Wipe and re-create the local vault. Cloud notes are not affected."""
    await service.reset_vault()
    return None
