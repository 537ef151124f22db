from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from aether.utils.markdown import extract_tags

if TYPE_CHECKING:
    from aether.core.models.note import Note
    from aether.core.services.vault_service import VaultService

EXPORT_TITLE = "Aether Nexus Export"


def _format_date(ms: int | None) -> str:
    if ms is None:
        return "Unknown"
    return datetime.fromtimestamp(ms / 1000, tz=UTC).date().isoformat()


def render_note(note: Note) -> str:
    tags = sorted(extract_tags(note.body))
    tag_string = " ".join(f"#{t}" for t in tags) if tags else "None"
    return (
        f"## Document: {note.title}\n"
        f"**Date:** {_format_date(note.updated_at)}\n"
        f"**Tags:** {tag_string}\n\n"
        f"{note.body}\n\n---\n\n"
    )


class ExportService:
    """Serialize the non-archived corpus into one markdown document (e.g. for NotebookLM)."""

    def __init__(self, vault: VaultService) -> None:
        self._vault = vault

    async def export_markdown(self, *, today: date | None = None) -> str:
        today = today or datetime.now(UTC).date()
        notes = await self._vault.read_all_thoughts()
        parts = [f"# {EXPORT_TITLE}\n\n*Generated on: {today.isoformat()}*\n\n---\n\n"]
        parts.extend(render_note(n) for n in notes)
        return "".join(parts)

    @staticmethod
    def export_filename(today: date | None = None) -> str:
        today = today or datetime.now(UTC).date()
        return f"Aether_Export_{today.isoformat()}.md"
