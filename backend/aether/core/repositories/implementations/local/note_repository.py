from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from aether.core.codec.metadata import (
    Degraded,
    compose_record,
    decode_metadata,
    metadata_of,
    split_title,
)
from aether.core.errors import StorageUnavailableError
from aether.core.models.note import Note
from aether.core.repositories.note_repository import NoteRepository
from aether.utils.logging import get_logger
from aether.utils.markdown import parse_links

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from aether.core.models.note import NoteMetadata

    from .storage import BlobStorage

logger = get_logger(__name__)


class LocalNoteRepository(NoteRepository):
    """Note repository backed by on-device blob storage.

    Records are markdown text with a metadata envelope line (see
    ``aether.core.codec.metadata``). Reads degrade instead of failing: a missing
    or unreadable record is ``None`` and broken records are skipped by ``read_all``.
    """

    def __init__(self, storage: BlobStorage) -> None:
        self._storage = storage

    @property
    def storage(self) -> BlobStorage:
        return self._storage

    async def initialize(self) -> bool:
        """Create the storage root if missing. Return True when it was created."""

        def _init() -> bool:
            if self._storage.exists():
                return False
            self._storage.create()
            return True

        return await self._run(_init)

    async def destroy(self) -> None:
        """Remove every local note and the storage root itself."""
        await self._run(self._storage.destroy)

    async def read(self, note_id: str) -> Note | None:
        try:
            raw = await self._run(lambda: self._storage.get(note_id))
            if raw is None:
                return None
            return self._to_note(note_id, raw)
        except (StorageUnavailableError, ValueError) as err:
            logger.warning("Failed to read note %s: %s", note_id, err)
            return None

    async def read_all(self, *, include_archived: bool = False) -> Sequence[Note]:
        notes = await self._run(self._load_all)
        if not include_archived:
            notes = [n for n in notes if not n.is_archived]
        return sorted(notes, key=lambda n: (n.updated_at or 0, n.id), reverse=True)

    async def write(self, note_id: str, title: str, body: str, meta: NoteMetadata) -> None:
        content = compose_record(title, body, meta)
        await self._run(lambda: self._storage.put(note_id, content))

    async def delete(self, note_id: str) -> None:
        await self._run(lambda: self._storage.remove(note_id))

    def _load_all(self) -> list[Note]:
        notes: list[Note] = []
        for key in self._storage.keys():
            try:
                raw = self._storage.get(key)
                if raw is None:
                    continue
                notes.append(self._to_note(key, raw))
            except (OSError, UnicodeDecodeError, ValueError) as err:
                logger.warning("Skipping unreadable note %s: %s", key, err)
        return notes

    @staticmethod
    def _to_note(note_id: str, raw: str) -> Note:
        result = decode_metadata(raw)
        if isinstance(result, Degraded) and result.reason != "missing envelope":
            logger.warning("Note %s has %s; metadata ignored", note_id, result.reason)
        meta = metadata_of(result)
        title, body = split_title(note_id, result.body)
        return Note(
            id=note_id,
            title=title,
            body=body,
            links=parse_links(body),
            backlinks=[],
            created_at=meta.created_at,
            updated_at=meta.updated_at,
            is_archived=bool(meta.is_archived),
        )

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(func)
        except OSError as err:
            raise StorageUnavailableError(str(err)) from err
