"""In-memory row store.

Provides a complete in-memory implementation of RowStore, useful for
tests, demos and running the app without a hosted backend.

Example:
    >>> import asyncio
    >>> from findr.storage.memory import MemoryRowStore
    >>> store = MemoryRowStore()
    >>> row = asyncio.run(store.insert("users", {"email": "a@b.c"}))
    >>> sorted(row)
    ['created_at', 'email', 'id', 'updated_at']
"""

from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from datetime import UTC, datetime

from findr.protocols.rows import Filter, Row


def _now() -> str:
    return datetime.now(UTC).isoformat()


class MemoryRowStore:
    """In-memory tables using dictionaries.

    Safe for single-process async usage. Data is lost when the process
    exits. Rows are copied on the way in and out, like a real database.
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, Row]] = defaultdict(dict)
        self._initialized = False

    async def initialize(self) -> None:
        """No-op for memory storage."""
        self._initialized = True

    async def close(self) -> None:
        """Clear all data."""
        self._tables.clear()
        self._initialized = False

    async def insert(self, table: str, row: Row) -> Row:
        """Insert a row, assigning ``id`` and audit timestamps."""
        stored = copy.deepcopy(row)
        stored.setdefault("id", str(uuid.uuid4()))
        now = _now()
        stored.setdefault("created_at", now)
        stored.setdefault("updated_at", now)

        rows = self._tables[table]
        if stored["id"] in rows:
            raise ValueError(f"Duplicate id in {table}: {stored['id']}")
        rows[stored["id"]] = stored
        return copy.deepcopy(stored)

    async def update(self, table: str, filters: list[Filter], values: Row) -> list[Row]:
        """Apply ``values`` to every matching row."""
        updated: list[Row] = []
        for row in self._matching(table, filters):
            row.update(copy.deepcopy(values))
            row["updated_at"] = _now()
            updated.append(copy.deepcopy(row))
        return updated

    async def delete(self, table: str, filters: list[Filter]) -> int:
        """Delete matching rows."""
        doomed = [row["id"] for row in self._matching(table, filters)]
        for row_id in doomed:
            del self._tables[table][row_id]
        return len(doomed)

    async def select(
        self,
        table: str,
        filters: list[Filter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Return matching rows, optionally sorted and limited."""
        rows = self._matching(table, filters or [])

        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by) or ""), reverse=descending)

        if limit is not None:
            rows = rows[:limit]
        return [copy.deepcopy(r) for r in rows]

    def _matching(self, table: str, filters: list[Filter]) -> list[Row]:
        return [row for row in self._tables[table].values() if all(f.matches(row) for f in filters)]

    def __len__(self) -> int:
        return sum(len(rows) for rows in self._tables.values())
