"""Row store protocol.

Defines the interface to a relational table store. Rows are plain dicts
keyed by column name; the store assigns ``id`` and audit timestamps on
insert and returns the materialized row.

Example:
    >>> from findr.protocols.rows import Filter, RowStore
    >>> Filter.eq("user_id", "u-1")
    Filter(column='user_id', op='eq', value='u-1')
    >>> hasattr(RowStore, "insert")
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable

Row = dict[str, Any]
Operator = Literal["eq", "gte", "lte"]


@dataclass(frozen=True)
class Filter:
    """One column predicate. Filters passed together are ANDed."""

    column: str
    op: Operator
    value: Any

    @classmethod
    def eq(cls, column: str, value: Any) -> Filter:
        return cls(column, "eq", value)

    @classmethod
    def gte(cls, column: str, value: Any) -> Filter:
        return cls(column, "gte", value)

    @classmethod
    def lte(cls, column: str, value: Any) -> Filter:
        return cls(column, "lte", value)

    def matches(self, row: Row) -> bool:
        """Evaluate against an in-memory row.

        Example:
            >>> Filter.gte("latitude", 10).matches({"latitude": 12.5})
            True
            >>> Filter.eq("id", "a").matches({})
            False
        """
        if self.column not in row:
            return False
        actual = row[self.column]
        if self.op == "eq":
            return actual == self.value
        if actual is None:
            return False
        if self.op == "gte":
            return actual >= self.value
        return actual <= self.value


@runtime_checkable
class RowStore(Protocol):
    """Table store protocol.

    See Also:
        findr.storage.postgrest.PostgrestRowStore: Hosted store over HTTPS
        findr.storage.memory.MemoryRowStore: In-memory implementation
        findr.storage.sqlalchemy_storage.SQLAlchemyRowStore: SQL databases
    """

    async def insert(self, table: str, row: Row) -> Row:
        """Insert one row and return it as stored."""
        ...

    async def update(self, table: str, filters: list[Filter], values: Row) -> list[Row]:
        """Update matching rows; return them as stored."""
        ...

    async def delete(self, table: str, filters: list[Filter]) -> int:
        """Delete matching rows; return how many were removed."""
        ...

    async def select(
        self,
        table: str,
        filters: list[Filter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Return matching rows."""
        ...

    async def initialize(self) -> None:
        """Prepare the store (connections, tables)."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...
