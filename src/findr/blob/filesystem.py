"""Filesystem blob storage.

Stores uploaded photos under a local directory and hands out ``file://``
URLs. Used with local database backends and in tests.

Example:
    >>> import asyncio
    >>> import tempfile
    >>> from findr.blob.filesystem import FilesystemBlob
    >>> with tempfile.TemporaryDirectory() as tmpdir:
    ...     blob = FilesystemBlob(root=tmpdir)
    ...     asyncio.run(blob.initialize())
    ...     info = asyncio.run(blob.put("u-1/1.jpg", b"jpeg", "image/jpeg"))
    ...     info.size
    4
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from findr.core.exceptions import StorageError
from findr.protocols.blob import BlobInfo


class FilesystemBlob:
    """Local filesystem blob storage.

    Best for: Development, offline use, tests.
    """

    def __init__(self, root: str | Path = "./data/blobs", create_dirs: bool = True) -> None:
        """Initialize filesystem blob storage.

        Args:
            root: Root directory for blob storage.
            create_dirs: Create directories if they don't exist.
        """
        self._root = Path(root)
        self._create_dirs = create_dirs
        self._initialized = False

    @property
    def root(self) -> Path:
        return self._root

    async def initialize(self) -> None:
        if self._create_dirs:
            self._root.mkdir(parents=True, exist_ok=True)
        self._initialized = True

    async def close(self) -> None:
        """No-op for filesystem."""
        self._initialized = False

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> BlobInfo:
        """Store a blob; an existing key is an error (no upsert)."""
        path = self._key_to_path(key)
        if path.exists():
            raise StorageError(f"Blob already exists: {key}")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

        return BlobInfo(
            key=key,
            size=len(data),
            content_type=content_type,
            public_url=self.public_url(key),
            etag=hashlib.sha256(data).hexdigest(),
        )

    async def get(self, key: str) -> bytes | None:
        path = self._key_to_path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    async def delete(self, key: str) -> bool:
        path = self._key_to_path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def public_url(self, key: str) -> str:
        return self._key_to_path(key).resolve().as_uri()

    def _key_to_path(self, key: str) -> Path:
        """Convert blob key to filesystem path, refusing to escape the root."""
        safe_key = key.lstrip("/")
        if ".." in Path(safe_key).parts:
            raise StorageError(f"Invalid blob key: {key}")
        return self._root / safe_key
