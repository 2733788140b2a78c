"""Hosted relational store over the PostgREST HTTP API (Supabase).

Every call is a single HTTPS request authenticated with the project's
anonymous key. Failures surface as ``StorageError``; ``NotConfiguredError``
is raised up front when the credentials are placeholders.

Example:
    >>> from findr.storage.postgrest import PostgrestRowStore
    >>> store = PostgrestRowStore("https://abc.supabase.co", "anon-key")
    >>> store.rest_url
    'https://abc.supabase.co/rest/v1'
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from findr.core.config import is_placeholder
from findr.core.exceptions import NotConfiguredError, StorageError
from findr.http.client import HttpClient, HttpClientError
from findr.http.supabase import supabase_headers
from findr.protocols.rows import Filter, Row

logger = logging.getLogger(__name__)


def encode_filter(f: Filter) -> tuple[str, str]:
    """Render a filter as a PostgREST query parameter.

    Example:
        >>> encode_filter(Filter.eq("is_active", True))
        ('is_active', 'eq.true')
        >>> encode_filter(Filter.lte("latitude", 40.5))
        ('latitude', 'lte.40.5')
    """
    value = f.value
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif value is None:
        return (f.column, "is.null")
    else:
        text = str(value)
    return (f.column, f"{f.op}.{text}")


class PostgrestRowStore:
    """RowStore backed by a hosted PostgREST endpoint."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._anon_key = anon_key
        self._http = HttpClient(
            f"{self._url}/rest/v1",
            timeout=timeout,
            headers=supabase_headers(anon_key),
            transport=transport,
        )

    @property
    def rest_url(self) -> str:
        return self._http.base_url

    @property
    def configured(self) -> bool:
        return not (is_placeholder(self._url) or is_placeholder(self._anon_key))

    async def initialize(self) -> None:
        """Tables are managed server-side; nothing to create."""

    async def close(self) -> None:
        await self._http.close()

    def _require_configured(self) -> None:
        if not self.configured:
            raise NotConfiguredError("Supabase not configured")

    async def _send(self, method: str, table: str, **kwargs: Any) -> Any:
        self._require_configured()
        try:
            response = await self._http.request(method, f"/{table}", **kwargs)
        except HttpClientError as e:
            logger.warning("%s %s failed: %s", method, table, e)
            raise StorageError(f"{method} {table} failed: {e}") from e
        if not response.content:
            return []
        return response.json()

    async def insert(self, table: str, row: Row) -> Row:
        rows = await self._send(
            "POST",
            table,
            json=row,
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise StorageError(f"Insert into {table} returned no row")
        return rows[0]

    async def update(self, table: str, filters: list[Filter], values: Row) -> list[Row]:
        return await self._send(
            "PATCH",
            table,
            params=[encode_filter(f) for f in filters],
            json=values,
            headers={"Prefer": "return=representation"},
        )

    async def delete(self, table: str, filters: list[Filter]) -> int:
        rows = await self._send(
            "DELETE",
            table,
            params=[encode_filter(f) for f in filters],
            headers={"Prefer": "return=representation"},
        )
        return len(rows)

    async def select(
        self,
        table: str,
        filters: list[Filter] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        params: list[tuple[str, str]] = [("select", "*")]
        params.extend(encode_filter(f) for f in filters or [])
        if order_by:
            params.append(("order", f"{order_by}.{'desc' if descending else 'asc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))
        return await self._send("GET", table, params=params)
