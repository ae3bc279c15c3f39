# =============================================================================
# tests/fake_supabase.py - In-Memory Supabase Client
# =============================================================================
# Implements the slice of the supabase-py query builder the gateway uses:
#   client.table(name).select(cols, count=...).eq(col, val).order(...).limit(n)
#   .single().insert(row).update(values).delete().execute()
#
# Rows live in plain dicts so tests can inspect the "database" directly.
# =============================================================================

import copy
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass
class FakeResponse:
    data: Any
    count: int | None = None


class FakeQuery:
    """One chained query against a FakeSupabaseClient table."""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._op = "select"
        self._values: dict[str, Any] | None = None
        self._filters: list[tuple[str, Any]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None
        self._single = False
        self._count: str | None = None

    # Operations ---------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None):
        self._op = "select"
        self._count = count
        return self

    def insert(self, values: dict[str, Any]):
        self._op = "insert"
        self._values = values
        return self

    def update(self, values: dict[str, Any]):
        self._op = "update"
        self._values = values
        return self

    def delete(self):
        self._op = "delete"
        return self

    # Modifiers ----------------------------------------------------------

    def eq(self, column: str, value: Any):
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self._order = (column, desc)
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    def single(self):
        self._single = True
        return self

    # Execution ----------------------------------------------------------

    def _matches(self, row: dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self._filters)

    def execute(self) -> FakeResponse:
        self._client.calls.append((self._op, self._table))
        if self._client.fail_with is not None:
            raise self._client.fail_with

        rows = self._client.tables.setdefault(self._table, [])

        if self._op == "insert":
            row = copy.deepcopy(self._values)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            rows.append(row)
            return FakeResponse(data=[copy.deepcopy(row)])

        matched = [row for row in rows if self._matches(row)]

        if self._op == "update":
            for row in matched:
                row.update(copy.deepcopy(self._values))
            return FakeResponse(data=copy.deepcopy(matched))

        if self._op == "delete":
            self._client.tables[self._table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(data=copy.deepcopy(matched))

        if self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]

        if self._single:
            if len(matched) != 1:
                raise Exception(
                    "{'code': 'PGRST116', 'message': 'JSON object requested, "
                    "multiple (or no) rows returned'}"
                )
            return FakeResponse(data=copy.deepcopy(matched[0]))

        count = len(matched) if self._count == "exact" else None
        return FakeResponse(data=copy.deepcopy(matched), count=count)


class FakeSupabaseClient:
    """Stand-in for supabase.Client backed by dicts."""

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.get(table, [])

    def seed(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.tables.setdefault(table, []).append(stored)
        return stored
