from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, status

from aether.api.v1.schemas.note import NoteRead, NoteSave
from aether.dependencies import get_vault_service

if TYPE_CHECKING:
    from aether.core.services.vault_service import VaultService

router = APIRouter()


@router.get("/", response_model=list[NoteRead])
async def list_notes(
    include_archived: bool = False,
    tag: str | None = None,
    q: str | None = None,
    service: VaultService = Depends(get_vault_service),
):
    """List notes, most recently updated first.

    ``tag`` and ``q`` (title search) only apply to non-archived notes.
    """
    if tag:
        notes = await service.list_thoughts_by_tag(tag)
    elif q:
        notes = await service.search_thoughts(q)
    else:
        notes = await service.read_all_thoughts(include_archived=include_archived)
    return [NoteRead.model_validate(n) for n in notes]


@router.post("/", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def save_note(
    payload: NoteSave,
    service: VaultService = Depends(get_vault_service),
):
    note_id = await service.save_thought(
        payload.title,
        payload.body,
        previous_id=payload.previous_id,
        is_archived=payload.is_archived,
    )
    note = await service.read_thought(note_id)
    if not note:
        raise HTTPException(status_code=500, detail="Note was saved but could not be read back")
    return NoteRead.model_validate(note)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: str,
    service: VaultService = Depends(get_vault_service),
):
    note = await service.read_thought(note_id)
    if not note:
        raise HTTPException(status_code=404, detail="Note not found")
    return NoteRead.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    service: VaultService = Depends(get_vault_service),
):
    await service.delete_thought(note_id)
    return None


@router.post("/{note_id}/archive", status_code=status.HTTP_204_NO_CONTENT)
async def archive_note(
    note_id: str,
    service: VaultService = Depends(get_vault_service),
):
    if not await service.archive_thought(note_id):
        raise HTTPException(status_code=404, detail="Note not found")
    return None


@router.post("/{note_id}/unarchive", status_code=status.HTTP_204_NO_CONTENT)
async def unarchive_note(
    note_id: str,
    service: VaultService = Depends(get_vault_service),
):
    if not await service.unarchive_thought(note_id):
        raise HTTPException(status_code=404, detail="Note not found")
    return None
