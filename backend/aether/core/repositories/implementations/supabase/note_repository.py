from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import httpx
from postgrest.exceptions import APIError

from aether.core.errors import AuthenticationRequiredError, StorageUnavailableError
from aether.core.models.note import Note
from aether.core.repositories.note_repository import NoteRepository
from aether.utils.logging import get_logger
from aether.utils.markdown import parse_links

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from supabase import Client

    from aether.core.models.note import NoteMetadata
    from aether.core.schemas.auth import Identity


class SupabaseNoteRepository(NoteRepository):
    """Supabase implementation of the NoteRepository.

    Notes live in a per-user slice of the ``notes`` table keyed by ``(user_id, id)``
    with columns ``title``, ``content``, ``created_at``/``updated_at`` (epoch ms,
    bigint) and ``is_archived``. Every call resolves the current identity first and
    raises ``AuthenticationRequiredError`` when nobody is signed in.
    """

    TABLE_NAME = "notes"

    def __init__(
        self,
        client: Client,
        identity: Callable[[], Identity | None],
        *,
        table_name: str | None = None,
    ) -> None:
        self._client: Client = client
        self._identity = identity
        self._table_name = table_name or self.TABLE_NAME

    def _user_id(self) -> str:
        identity = self._identity()
        if identity is None or not identity.id:
            raise AuthenticationRequiredError()
        return identity.id

    def _table(self):
        return self._client.table(self._table_name)

    async def read(self, note_id: str) -> Note | None:
        user_id = self._user_id()
        resp = await self._run(
            lambda: self._table()
            .select("*")
            .eq("user_id", user_id)
            .eq("id", note_id)
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_note(items[0])

    async def read_all(self, *, include_archived: bool = False) -> Sequence[Note]:
        user_id = self._user_id()

        def _query():
            q = self._table().select("*").eq("user_id", user_id)
            if not include_archived:
                q = q.eq("is_archived", False)
            return q.order("updated_at", desc=True).execute()

        resp = await self._run(_query)
        items = resp.data or []
        notes = [self._row_to_note(i) for i in items]
        # PostgREST sorts null timestamps first on a descending order
        return sorted(notes, key=lambda n: (n.updated_at or 0, n.id), reverse=True)

    async def write(self, note_id: str, title: str, body: str, meta: NoteMetadata) -> None:
        row: dict[str, Any] = {
            "id": note_id,
            "user_id": self._user_id(),
            "title": title,
            "content": body,
        }
        # Upsert merges: fields left out keep their stored value
        for column, value in (
            ("created_at", meta.created_at),
            ("updated_at", meta.updated_at),
            ("is_archived", meta.is_archived),
        ):
            if value is not None:
                row[column] = value

        await self._run(
            lambda: self._table()
            .upsert(row, on_conflict="user_id,id")
            .execute()
        )

    async def delete(self, note_id: str) -> None:
        user_id = self._user_id()
        await self._run(
            lambda: self._table()
            .delete()
            .eq("user_id", user_id)
            .eq("id", note_id)
            .execute()
        )

    async def set_archived(self, note_id: str, archived: bool) -> bool:
        # Partial update; title, content and timestamps are left untouched
        user_id = self._user_id()
        resp = await self._run(
            lambda: self._table()
            .update({"is_archived": archived})
            .eq("user_id", user_id)
            .eq("id", note_id)
            .execute()
        )
        return bool(resp.data)

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(func)
        except (APIError, httpx.HTTPError) as err:
            logger.error("Supabase request failed: %s", err)
            raise StorageUnavailableError(str(err)) from err

    @staticmethod
    def _row_to_note(row: dict[str, Any]) -> Note:
        content = row.get("content") or ""
        return Note(
            id=row["id"],
            title=row.get("title") or row["id"],
            body=content,
            links=parse_links(content),
            backlinks=[],
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            is_archived=bool(row.get("is_archived")),
        )
