"""File-backed key-value store.

Each key is one JSON file in a namespace directory, so the session and
credential cache survive restarts of the app.

Example:
    >>> import asyncio
    >>> import tempfile
    >>> from pathlib import Path
    >>> from findr.keyvalue.file import FileKeyValueStore
    >>> async def example():
    ...     with tempfile.TemporaryDirectory() as tmpdir:
    ...         kv = FileKeyValueStore(Path(tmpdir), namespace="findr")
    ...         await kv.set("registered_users", {})
    ...         return await kv.keys()
    >>> asyncio.run(example())
    ['registered_users']
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class FileKeyValueStore:
    """JSON files under ``<directory>/<namespace>/``."""

    def __init__(self, directory: Path | str, namespace: str = "findr") -> None:
        """Initialize file key-value store.

        Args:
            directory: Base directory (device data dir).
            namespace: Subdirectory isolating this app's keys.
        """
        self._directory = Path(directory) / namespace
        self._directory.mkdir(parents=True, exist_ok=True)

    def _key_path(self, key: str) -> Path:
        safe_key = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
        return self._directory / f"{safe_key}.json"

    async def get(self, key: str) -> Any | None:
        path = self._key_path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt value for key %s", key)
            return None

    async def set(self, key: str, value: Any) -> None:
        path = self._key_path(key)
        temp_path = path.with_suffix(".json.tmp")
        temp_path.write_text(json.dumps(value, indent=2, default=str), encoding="utf-8")
        # Atomic move
        os.replace(temp_path, path)

    async def delete(self, key: str) -> bool:
        path = self._key_path(key)
        if path.exists():
            path.unlink()
            return True
        return False

    async def keys(self) -> list[str]:
        return sorted(p.stem for p in self._directory.glob("*.json"))
