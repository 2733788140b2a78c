"""
SQLAlchemy-based row store.

Runs the service layer against any SQL database SQLAlchemy supports,
typically a local SQLite file for offline development or a self-hosted
PostgreSQL instead of the hosted store.

Usage:
    from findr.storage.sqlalchemy_storage import SQLAlchemyRowStore

    store = SQLAlchemyRowStore("sqlite:///data/findr.db")
    await store.initialize()
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Iterator

from sqlalchemy import DateTime, Table, create_engine, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from findr.core.exceptions import StorageError
from findr.protocols.rows import Filter, Row
from findr.storage.models import Base, create_all_tables

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


class SQLAlchemyRowStore:
    """
    RowStore over a SQLAlchemy engine.

    Args:
        connection_string: SQLAlchemy database URL
        echo: Log SQL statements
    """

    def __init__(self, connection_string: str = "sqlite:///data/findr.db", echo: bool = False):
        self.connection_string = connection_string
        self.echo = echo
        self._engine: Engine | None = None
        self._initialized = False

    def _get_engine(self) -> "Engine":
        """Get or create SQLAlchemy engine."""
        if self._engine is None:
            kwargs: dict[str, Any] = {"echo": self.echo}
            if self.connection_string in MEMORY_URLS:
                # One shared connection, otherwise each checkout sees an empty database
                kwargs["poolclass"] = StaticPool
                kwargs["connect_args"] = {"check_same_thread": False}
            self._engine = create_engine(self.connection_string, **kwargs)
        return self._engine

    @contextmanager
    def _connect(self) -> Iterator["Connection"]:
        """Transaction scope translating driver errors to StorageError."""
        try:
            with self._get_engine().begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.warning("Database operation failed: %s", e)
            raise StorageError(f"Database operation failed: {e}") from e

    async def initialize(self) -> None:
        """Create tables. Safe to call multiple times."""
        create_all_tables(self._get_engine())
        self._initialized = True
        logger.info("SQLAlchemyRowStore initialized (%s)", self._get_engine().url.render_as_string())

    async def close(self) -> None:
        """Close all connections."""
        if self._engine:
            self._engine.dispose()
            self._engine = None
        self._initialized = False

    # =========================================================================
    # Row Operations
    # =========================================================================

    async def insert(self, table: str, row: Row) -> Row:
        tbl = self._table(table)
        values = self._coerce(tbl, row)
        values.setdefault("id", str(uuid.uuid4()))
        with self._connect() as conn:
            conn.execute(insert(tbl).values(**values))
            stored = conn.execute(select(tbl).where(tbl.c.id == values["id"])).one()
        return self._to_row(stored._mapping)

    async def update(self, table: str, filters: list[Filter], values: Row) -> list[Row]:
        tbl = self._table(table)
        clauses = self._where(tbl, filters)
        with self._connect() as conn:
            ids = [r.id for r in conn.execute(select(tbl.c.id).where(*clauses))]
            if not ids:
                return []
            changes = self._coerce(tbl, values)
            if "updated_at" in tbl.c:
                changes["updated_at"] = datetime.now(timezone.utc)
            conn.execute(update(tbl).where(tbl.c.id.in_(ids)).values(**changes))
            rows = conn.execute(select(tbl).where(tbl.c.id.in_(ids))).all()
        return [self._to_row(r._mapping) for r in rows]

    async def delete(self, table: str, filters: list[Filter]) -> int:
        tbl = self._table(table)
        with self._connect() as conn:
            result = conn.execute(delete(tbl).where(*self._where(tbl, filters)))
        return result.rowcount or 0

    async def select(
        self,
        table: str,
        filters: list[Filter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        tbl = self._table(table)
        stmt = select(tbl).where(*self._where(tbl, filters or []))
        if order_by:
            column = self._column(tbl, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._connect() as conn:
            rows = conn.execute(stmt).all()
        return [self._to_row(r._mapping) for r in rows]

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _table(name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise StorageError(f"Unknown table: {name}") from None

    @staticmethod
    def _column(tbl: Table, name: str) -> Any:
        if name not in tbl.c:
            raise StorageError(f"Unknown column {tbl.name}.{name}")
        return tbl.c[name]

    def _where(self, tbl: Table, filters: list[Filter]) -> list[Any]:
        clauses = []
        for f in filters:
            column = self._column(tbl, f.column)
            value = self._coerce_value(column, f.value)
            if f.op == "eq":
                clauses.append(column.is_(None) if value is None else column == value)
            elif f.op == "gte":
                clauses.append(column >= value)
            else:
                clauses.append(column <= value)
        return clauses

    def _coerce(self, tbl: Table, values: Row) -> Row:
        return {key: self._coerce_value(self._column(tbl, key), value) for key, value in values.items()}

    @staticmethod
    def _coerce_value(column: Any, value: Any) -> Any:
        """Rows carry ISO-8601 strings; DateTime columns need datetimes."""
        if isinstance(column.type, DateTime) and isinstance(value, str):
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        return value

    @staticmethod
    def _to_row(mapping: Any) -> Row:
        row: Row = {}
        for key, value in mapping.items():
            if isinstance(value, datetime):
                if value.tzinfo is None:
                    value = value.replace(tzinfo=timezone.utc)
                value = value.isoformat()
            row[key] = value
        return row
