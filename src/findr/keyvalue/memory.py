"""In-memory key-value store.

Example:
    >>> import asyncio
    >>> from findr.keyvalue.memory import MemoryKeyValueStore
    >>> kv = MemoryKeyValueStore()
    >>> asyncio.run(kv.set("user_data", {"id": "u-1"}))
    >>> asyncio.run(kv.get("user_data"))
    {'id': 'u-1'}
"""

from __future__ import annotations

import copy
from typing import Any


class MemoryKeyValueStore:
    """Dictionary-backed store; values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> bool:
        if key in self._data:
            del self._data[key]
            return True
        return False

    async def keys(self) -> list[str]:
        return list(self._data)
