from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from aether.core.models.note import NoteMetadata
from aether.utils.logging import get_logger
from aether.utils.markdown import slugify

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aether.core.models.note import Note

logger = get_logger(__name__)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


class NoteRepository(ABC):
    """Abstract repository interface for notes.

    Implementations provide the four storage primitives (``read``, ``read_all``,
    ``write``, ``delete``). Saving with re-keying and archiving are defined here
    once so every store gives callers the same rename semantics.
    """

    @abstractmethod
    async def read(self, note_id: str) -> Note | None:  # pragma: no cover - interface only
        """Fetch a note by id or return None if not found."""

    @abstractmethod
    async def read_all(self, *, include_archived: bool = False) -> Sequence[Note]:  # pragma: no cover
        """Return notes ordered by last update, most recent first."""

    @abstractmethod
    async def write(self, note_id: str, title: str, body: str, meta: NoteMetadata) -> None:  # pragma: no cover
        """Create or overwrite the record stored under ``note_id``."""

    @abstractmethod
    async def delete(self, note_id: str) -> None:  # pragma: no cover
        """Delete a note by id. Deleting a missing id is not an error."""

    async def save(
        self,
        title: str,
        body: str,
        *,
        previous_id: str | None = None,
        is_archived: bool | None = None,
    ) -> str:
        """Persist a note under the id derived from ``title`` and return that id.

        ``previous_id`` identifies the record being edited. Its ``created_at``
        (and archive flag, unless ``is_archived`` is given) carry over; when the
        title change moves the note to a new id the old record is deleted after
        the new one is written. The two steps are not atomic.
        """
        title = " ".join((title or "").split())
        note_id = slugify(title)
        body = body or ""

        previous = await self.read(previous_id or note_id)
        if previous_id and previous_id != note_id and await self.read(note_id) is not None:
            logger.warning(
                "Rename overwrites an existing note",
                extra={"old_id": previous_id, "new_id": note_id},
            )
        now = now_ms()

        created_at = now
        updated_at = now
        archived = bool(is_archived)
        if previous is not None:
            if previous.created_at is not None:
                created_at = previous.created_at
            if previous.updated_at is not None:
                updated_at = max(now, previous.updated_at + 1)
            if is_archived is None:
                archived = previous.is_archived
        created_at = min(created_at, updated_at)

        meta = NoteMetadata(created_at=created_at, updated_at=updated_at, is_archived=archived)
        await self.write(note_id, title, body, meta)

        if previous_id and previous_id != note_id:
            await self.delete(previous_id)
            logger.info("Note renamed", extra={"old_id": previous_id, "new_id": note_id})

        return note_id

    async def set_archived(self, note_id: str, archived: bool) -> bool:
        """Flip the archive flag in place, keeping the id. Return False if the note does not exist."""
        note = await self.read(note_id)
        if note is None:
            return False
        meta = NoteMetadata(
            created_at=note.created_at,
            updated_at=max(now_ms(), (note.updated_at or 0) + 1),
            is_archived=archived,
        )
        await self.write(note_id, note.title, note.body, meta)
        return True

    async def archive(self, note_id: str) -> bool:
        return await self.set_archived(note_id, True)

    async def unarchive(self, note_id: str) -> bool:
        return await self.set_archived(note_id, False)
