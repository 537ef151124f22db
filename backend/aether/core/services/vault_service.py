from __future__ import annotations

from typing import TYPE_CHECKING

from aether.utils.logging import get_logger
from aether.utils.markdown import extract_tags

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from aether.core.models.note import Note
    from aether.core.repositories.implementations.local.note_repository import (
        LocalNoteRepository,
    )
    from aether.core.repositories.note_repository import NoteRepository
    from aether.core.schemas.auth import Identity

logger = get_logger(__name__)

SEED_THOUGHTS: tuple[tuple[str, str], ...] = (
    ("Welcome", "Your vault starts here. Capture an idea, link it with [[Thoughts]] and tag it #start."),
    (
        "Aether Nexus",
        "The central core of the second brain. It processes [[Thoughts]] and draws them as a graph. #aether #core",
    ),
    ("Thoughts", "Fleeting ideas captured in markdown. [[Aether Nexus]] organizes them visually. #ideas #aether"),
)


class VaultService:
    """Single entry point for note storage.

    Each call picks the cloud repository when an identity is active (and a cloud
    repository is configured), otherwise the local one. The choice is made per
    call, so signing in or out between calls switches backends. Nothing is cached.
    """

    def __init__(
        self,
        local: LocalNoteRepository,
        remote: NoteRepository | None = None,
        identity: Callable[[], Identity | None] | None = None,
        *,
        seed: bool = True,
    ) -> None:
        self._local = local
        self._remote = remote
        self._identity = identity
        self._seed = seed

    def _store(self) -> NoteRepository:
        if self._remote is not None and self._identity is not None and self._identity() is not None:
            return self._remote
        return self._local

    @property
    def is_cloud(self) -> bool:
        return self._store() is self._remote

    async def init_vault(self) -> bool:
        """Ensure local storage exists; seed starter notes on first creation."""
        created = await self._local.initialize()
        if created:
            logger.info("Local vault created")
            if self._seed:
                for title, body in SEED_THOUGHTS:
                    await self._local.save(title, body)
                logger.info("Seeded vault with %d notes", len(SEED_THOUGHTS))
        return created

    async def reset_vault(self) -> None:
        """Destroy all local notes and start over. Cloud data is untouched."""
        await self._local.destroy()
        logger.warning("Local vault reset")
        await self.init_vault()

    async def save_thought(
        self,
        title: str,
        body: str,
        *,
        previous_id: str | None = None,
        is_archived: bool | None = None,
    ) -> str:
        return await self._store().save(title, body, previous_id=previous_id, is_archived=is_archived)

    async def read_thought(self, note_id: str) -> Note | None:
        return await self._store().read(note_id)

    async def read_all_thoughts(self, include_archived: bool = False) -> Sequence[Note]:
        return await self._store().read_all(include_archived=include_archived)

    async def delete_thought(self, note_id: str) -> None:
        await self._store().delete(note_id)

    async def archive_thought(self, note_id: str) -> bool:
        return await self._store().archive(note_id)

    async def unarchive_thought(self, note_id: str) -> bool:
        return await self._store().unarchive(note_id)

    async def search_thoughts(self, query: str) -> list[Note]:
        """Non-archived notes whose title contains ``query`` (case-insensitive)."""
        notes = await self.read_all_thoughts()
        needle = (query or "").strip().lower()
        if not needle:
            return list(notes)
        return [n for n in notes if needle in n.title.lower()]

    async def list_thoughts_by_tag(self, tag: str) -> list[Note]:
        notes = await self.read_all_thoughts()
        tag = tag.lstrip("#")
        return [n for n in notes if tag in extract_tags(n.body)]
