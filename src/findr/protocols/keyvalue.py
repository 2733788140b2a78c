"""Device-local key-value store protocol.

Holds the session user and the credential cache. Values are JSON-safe
Python objects.

Example:
    >>> from findr.protocols.keyvalue import KeyValueStore
    >>> hasattr(KeyValueStore, "get")
    True
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Namespaced key-value storage scoped to one device."""

    async def get(self, key: str) -> Any | None:
        """Get value, or None if absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Set value, replacing any previous one."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True if it existed."""
        ...

    async def keys(self) -> list[str]:
        """All keys in this namespace."""
        ...
