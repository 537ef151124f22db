from __future__ import annotations

import logging
from pathlib import Path

import pytest

from aether.core.errors import InvalidTitleError, StorageUnavailableError
from aether.core.repositories import note_repository as note_repository_module
from aether.core.repositories.implementations.local.note_repository import LocalNoteRepository
from aether.core.repositories.implementations.local.storage import FileBlobStorage, JsonBlobStorage
from aether.utils.markdown import extract_tags, parse_links

@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> list[int]:
    """Controllable millisecond clock for save()."""
    ticks = [1_000]
    monkeypatch.setattr(note_repository_module, "now_ms", lambda: ticks[0])
    return ticks

@pytest.mark.asyncio
async def test_save_then_read_round_trip(local_repo: LocalNoteRepository) -> None:
    body = "Thinking about [[Alpha]] and [[Beta]] #idea #work"

    note_id = await local_repo.save("First Thought", body)
    note = await local_repo.read(note_id)

    assert note_id == "first-thought"
    assert note is not None
    assert note.title == "First Thought"
    assert note.body == body
    assert note.links == parse_links(body)
    assert set(note.tags) == extract_tags(body)
    assert note.backlinks == []
    assert note.is_archived is False
    assert note.created_at == note.updated_at

@pytest.mark.asyncio
async def test_stored_file_has_envelope_and_heading(tmp_path: Path) -> None:
    repo = LocalNoteRepository(FileBlobStorage(tmp_path))

    await repo.save("Hello World", "body text")

    raw = (tmp_path / "thoughts" / "hello-world.md").read_text(encoding="utf-8")
    first, second, rest = raw.split("\n", 2)
    assert first.startswith("<!--aether-meta:") and first.endswith("-->")
    assert second == "# Hello World"
    assert rest == "\nbody text"

@pytest.mark.asyncio
async def test_read_missing_note_returns_none(local_repo: LocalNoteRepository) -> None:
    assert await local_repo.read("does-not-exist") is None

@pytest.mark.asyncio
async def test_rename_preserves_created_at_and_removes_old_id(
    local_repo: LocalNoteRepository, clock: list[int]
) -> None:
    old_id = await local_repo.save("Title A", "same body")
    first = await local_repo.read(old_id)

    clock[0] = 5_000
    new_id = await local_repo.save("Title B", "same body", previous_id=old_id)
    renamed = await local_repo.read(new_id)

    assert new_id == "title-b"
    assert await local_repo.read(old_id) is None
    assert first is not None and renamed is not None
    assert renamed.created_at == first.created_at == 1_000
    assert renamed.updated_at == 5_000

@pytest.mark.asyncio
async def test_updated_at_strictly_increases_within_same_millisecond(
    local_repo: LocalNoteRepository, clock: list[int]
) -> None:
    note_id = await local_repo.save("Quick", "v1")
    await local_repo.save("Quick", "v2", previous_id=note_id)
    note = await local_repo.read(note_id)

    assert note is not None
    assert note.body == "v2"
    assert note.created_at == 1_000
    assert note.updated_at == 1_001

@pytest.mark.asyncio
async def test_archive_hides_note_from_default_listing(local_repo: LocalNoteRepository) -> None:
    keep = await local_repo.save("Keep", "visible")
    hide = await local_repo.save("Hide", "hidden")

    assert await local_repo.archive(hide) is True

    default_ids = [n.id for n in await local_repo.read_all()]
    all_ids = [n.id for n in await local_repo.read_all(include_archived=True)]
    assert default_ids == [keep]
    assert set(all_ids) == {keep, hide}

    archived = await local_repo.read(hide)
    assert archived is not None and archived.is_archived is True

@pytest.mark.asyncio
async def test_edit_keeps_archive_flag_unless_given(local_repo: LocalNoteRepository) -> None:
    note_id = await local_repo.save("Old", "text", is_archived=True)

    await local_repo.save("Old", "edited", previous_id=note_id)
    still = await local_repo.read(note_id)
    assert still is not None and still.is_archived is True

    assert await local_repo.unarchive(note_id) is True
    back = await local_repo.read(note_id)
    assert back is not None and back.is_archived is False

@pytest.mark.asyncio
async def test_archive_keeps_id_when_body_has_its_own_heading(
    local_repo: LocalNoteRepository, clock: list[int]
) -> None:
    note_id = await local_repo.save("Alpha", "# Other\n\ntext #work")
    stored = await local_repo.read(note_id)
    assert note_id == "alpha"
    assert stored is not None
    assert (stored.title, stored.body) == ("Other", "text #work")

    clock[0] = 2_000
    assert await local_repo.archive(note_id) is True
    archived = await local_repo.read("alpha")
    assert await local_repo.read("other") is None
    assert archived is not None
    assert archived.is_archived is True
    assert (archived.title, archived.body) == ("Other", "text #work")
    assert archived.created_at == 1_000
    assert archived.updated_at == 2_000

    assert await local_repo.unarchive("alpha") is True
    assert [n.id for n in await local_repo.read_all(include_archived=True)] == ["alpha"]
    restored = await local_repo.read("alpha")
    assert restored is not None and restored.is_archived is False

@pytest.mark.asyncio
async def test_rename_onto_existing_note_warns(
    local_repo: LocalNoteRepository, caplog: pytest.LogCaptureFixture
) -> None:
    await local_repo.save("Target", "already here")
    source = await local_repo.save("Source", "moving")

    with caplog.at_level(logging.WARNING, logger=note_repository_module.__name__):
        new_id = await local_repo.save("Target", "moving", previous_id=source)

    assert new_id == "target"
    assert any(r.message == "Rename overwrites an existing note" for r in caplog.records)
    note = await local_repo.read("target")
    assert note is not None and note.body == "moving"
    assert await local_repo.read(source) is None

@pytest.mark.asyncio
async def test_plain_rename_does_not_warn(
    local_repo: LocalNoteRepository, caplog: pytest.LogCaptureFixture
) -> None:
    source = await local_repo.save("Source", "moving")

    with caplog.at_level(logging.WARNING, logger=note_repository_module.__name__):
        await local_repo.save("Fresh", "moving", previous_id=source)

    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

@pytest.mark.asyncio
async def test_archive_missing_note_returns_false(local_repo: LocalNoteRepository) -> None:
    assert await local_repo.archive("nope") is False

@pytest.mark.asyncio
async def test_delete_is_idempotent(local_repo: LocalNoteRepository) -> None:
    note_id = await local_repo.save("Gone", "soon")

    await local_repo.delete(note_id)
    await local_repo.delete(note_id)

    assert await local_repo.read(note_id) is None

@pytest.mark.asyncio
async def test_read_all_orders_by_most_recent_update(
    local_repo: LocalNoteRepository, clock: list[int]
) -> None:
    await local_repo.save("Older", "a")
    clock[0] = 2_000
    await local_repo.save("Newer", "b")
    clock[0] = 3_000
    await local_repo.save("Older", "a2", previous_id="older")

    assert [n.id for n in await local_repo.read_all()] == ["older", "newer"]

@pytest.mark.asyncio
async def test_corrupt_envelope_degrades_to_raw_body(tmp_path: Path) -> None:
    storage = FileBlobStorage(tmp_path)
    storage.put("broken", "<!--aether-meta:{oops-->\n# Broken\n\ntext")
    repo = LocalNoteRepository(storage)

    note = await repo.read("broken")

    assert note is not None
    assert note.created_at is None and note.updated_at is None
    assert note.is_archived is False
    # the envelope line is not recognised, so it stays in the body
    assert note.body.startswith("<!--aether-meta:{oops-->")

@pytest.mark.asyncio
async def test_plain_markdown_file_without_envelope(tmp_path: Path) -> None:
    storage = FileBlobStorage(tmp_path)
    storage.put("legacy-note", "Written before metadata existed. [[Thoughts]]")
    repo = LocalNoteRepository(storage)

    note = await repo.read("legacy-note")

    assert note is not None
    assert note.title == "Legacy Note"
    assert note.links == ["Thoughts"]

@pytest.mark.asyncio
async def test_read_all_skips_undecodable_records(tmp_path: Path) -> None:
    storage = FileBlobStorage(tmp_path)
    repo = LocalNoteRepository(storage)
    await repo.save("Good", "fine")
    (tmp_path / "thoughts" / "bad.md").write_bytes(b"\xff\xfe\x00binary")

    notes = await repo.read_all()

    assert [n.id for n in notes] == ["good"]
    assert await repo.read("bad") is None

@pytest.mark.asyncio
async def test_write_failure_raises_storage_unavailable(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    repo = LocalNoteRepository(FileBlobStorage(blocker))

    with pytest.raises(StorageUnavailableError):
        await repo.save("Anything", "body")

@pytest.mark.asyncio
async def test_initialize_and_destroy(tmp_path: Path) -> None:
    repo = LocalNoteRepository(FileBlobStorage(tmp_path / "vault"))

    assert await repo.initialize() is True
    assert await repo.initialize() is False

    await repo.save("Note", "x")
    await repo.destroy()

    assert not (tmp_path / "vault").exists()
    assert await repo.read_all() == []

@pytest.mark.asyncio
async def test_json_blob_backend_matches_file_backend(tmp_path: Path) -> None:
    repo = LocalNoteRepository(JsonBlobStorage(tmp_path))

    assert await repo.initialize() is True
    a = await repo.save("Alpha Note", "links to [[Beta]] #x")
    b = await repo.save("Beta", "plain")
    await repo.archive(b)

    assert (tmp_path / "vault.json").is_file()
    assert [n.id for n in await repo.read_all()] == [a]
    assert len(await repo.read_all(include_archived=True)) == 2

    await repo.delete(a)
    await repo.delete(a)
    assert await repo.read(a) is None

@pytest.mark.asyncio
async def test_json_blob_corruption_is_storage_error(tmp_path: Path) -> None:
    (tmp_path / "vault.json").write_text("[1, 2, 3]")
    repo = LocalNoteRepository(JsonBlobStorage(tmp_path))

    with pytest.raises(StorageUnavailableError):
        await repo.read_all()
    assert await repo.read("anything") is None

@pytest.mark.asyncio
async def test_save_rejects_unsluggable_title(local_repo: LocalNoteRepository) -> None:
    with pytest.raises(InvalidTitleError):
        await local_repo.save("???", "body")
