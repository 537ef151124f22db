"""Shared pytest fixtures."""
from __future__ import annotations

import os
import tempfile
from typing import Any

# Keep the default vault out of the user's home before settings are imported
os.environ.setdefault("AETHER_VAULT_DIR", tempfile.mkdtemp(prefix="aether-test-"))

import pytest
from postgrest.exceptions import APIError

from aether.core.repositories.implementations.local.note_repository import LocalNoteRepository
from aether.core.repositories.implementations.local.storage import FileBlobStorage
from aether.core.schemas.auth import Identity


class FakeResponse:
    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


class FakeQuery:
    """Just enough of the PostgREST builder for the note repository."""

    def __init__(self, table: FakeTable, op: str, payload: dict[str, Any] | None = None) -> None:
        self._table = table
        self._op = op
        self._payload = payload
        self._filters: list[tuple[str, Any]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None

    def select(self, _columns: str) -> FakeQuery:
        return self

    def eq(self, column: str, value: Any) -> FakeQuery:
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> FakeQuery:
        self._order = (column, desc)
        return self

    def limit(self, n: int) -> FakeQuery:
        self._limit = n
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(row.get(col) == val for col, val in self._filters)

    def execute(self) -> FakeResponse:
        self._table.calls.append(self._op)
        if self._table.fail_with is not None:
            raise self._table.fail_with
        rows = self._table.rows
        if self._op == "select":
            found = [dict(r) for r in rows if self._matches(r)]
            if self._order:
                column, desc = self._order
                # Postgres puts nulls first on DESC and last on ASC
                found.sort(key=lambda r: (r.get(column) is None, r.get(column) or 0), reverse=desc)
            if self._limit is not None:
                found = found[: self._limit]
            return FakeResponse(found)
        if self._op == "upsert":
            assert self._payload is not None
            for row in rows:
                if row["user_id"] == self._payload["user_id"] and row["id"] == self._payload["id"]:
                    row.update(self._payload)
                    return FakeResponse([dict(row)])
            stored = {"created_at": None, "updated_at": None, "is_archived": False, **self._payload}
            rows.append(stored)
            return FakeResponse([dict(stored)])
        if self._op == "update":
            assert self._payload is not None
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(self._payload)
                    changed.append(dict(row))
            return FakeResponse(changed)
        if self._op == "delete":
            removed = [dict(r) for r in rows if self._matches(r)]
            self._table.rows = [r for r in rows if not self._matches(r)]
            return FakeResponse(removed)
        raise AssertionError(f"unexpected op {self._op}")


class FakeTable:
    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    def select(self, columns: str = "*") -> FakeQuery:
        return FakeQuery(self, "select")

    def upsert(self, row: dict[str, Any], on_conflict: str = "") -> FakeQuery:
        return FakeQuery(self, "upsert", row)

    def update(self, values: dict[str, Any]) -> FakeQuery:
        return FakeQuery(self, "update", values)

    def delete(self) -> FakeQuery:
        return FakeQuery(self, "delete")


class FakeSupabaseClient:
    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeTable:
        return self.tables.setdefault(name, FakeTable())


def make_api_error(message: str = "boom") -> APIError:
    return APIError({"message": message, "code": "500", "hint": None, "details": None})


@pytest.fixture
def local_repo(tmp_path) -> LocalNoteRepository:
    return LocalNoteRepository(FileBlobStorage(tmp_path / "vault"))


@pytest.fixture
def supabase_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def identity() -> Identity:
    return Identity(id="user-1", email="user@example.com", access_token="a.b.c")


@pytest.fixture
def api_error() -> APIError:
    return make_api_error()
