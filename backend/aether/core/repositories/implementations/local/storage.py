"""Key-addressed blob storage used by the local vault.

Two layouts are supported: one markdown file per note inside a directory, or a
single JSON object holding every note under its key. Both are synchronous and
are driven from a worker thread by ``LocalNoteRepository``.
"""

from __future__ import annotations

import os
import shutil
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from aether.core.errors import InvalidNoteIdError, StorageUnavailableError

if TYPE_CHECKING:
    from pathlib import Path

NOTE_SUFFIX = ".md"

_blob_adapter: TypeAdapter[dict[str, str]] = TypeAdapter(dict[str, str])


class BlobStorage(ABC):
    """Minimal key/value contract for raw note records."""

    @abstractmethod
    def exists(self) -> bool: ...

    @abstractmethod
    def create(self) -> None: ...

    @abstractmethod
    def destroy(self) -> None: ...

    @abstractmethod
    def keys(self) -> list[str]: ...

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def put(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...


class FileBlobStorage(BlobStorage):
    """One ``<key>.md`` file per note under ``<root>/thoughts``."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.notes_dir = root / "thoughts"

    def _path(self, key: str) -> Path:
        if not key or key.startswith(".") or "/" in key or "\\" in key:
            raise InvalidNoteIdError(f"Invalid note id: {key!r}")
        return self.notes_dir / f"{key}{NOTE_SUFFIX}"

    def exists(self) -> bool:
        return self.notes_dir.is_dir()

    def create(self) -> None:
        self.notes_dir.mkdir(parents=True, exist_ok=True)

    def destroy(self) -> None:
        if self.root.exists():
            shutil.rmtree(self.root)

    def keys(self) -> list[str]:
        if not self.notes_dir.is_dir():
            return []
        return sorted(p.stem for p in self.notes_dir.glob(f"*{NOTE_SUFFIX}") if p.is_file())

    def get(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def put(self, key: str, value: str) -> None:
        self.notes_dir.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class JsonBlobStorage(BlobStorage):
    """All notes in a single ``vault.json`` object, rewritten on every change."""

    def __init__(self, root: Path, filename: str = "vault.json") -> None:
        self.root = root
        self.path = root / filename

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return {}
        try:
            return _blob_adapter.validate_json(raw)
        except ValidationError as err:
            raise StorageUnavailableError(f"Vault blob is unreadable: {self.path}") from err

    def _dump(self, data: dict[str, str]) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_bytes(_blob_adapter.dump_json(data, indent=2))
        os.replace(tmp, self.path)

    def exists(self) -> bool:
        return self.path.is_file()

    def create(self) -> None:
        if not self.path.exists():
            self._dump({})

    def destroy(self) -> None:
        self.path.unlink(missing_ok=True)

    def keys(self) -> list[str]:
        return sorted(self._load())

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def put(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)
