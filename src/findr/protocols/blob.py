"""Blob storage protocol.

Defines the interface for photo storage backends (hosted bucket, local
filesystem).

Example:
    >>> from findr.protocols.blob import BlobInfo
    >>> info = BlobInfo(
    ...     key="u-1/1700000000000.jpg",
    ...     size=1024,
    ...     content_type="image/jpeg",
    ...     public_url="https://cdn.example/u-1/1700000000000.jpg",
    ... )
    >>> info.content_type
    'image/jpeg'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class BlobInfo:
    """Metadata about a stored blob."""

    key: str
    size: int
    content_type: str
    public_url: str
    etag: str | None = None


@runtime_checkable
class BlobStorage(Protocol):
    """Blob storage protocol for uploaded photos."""

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> BlobInfo:
        """Store a blob. Existing keys are not overwritten."""
        ...

    async def get(self, key: str) -> bytes | None:
        """Get blob contents."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete a blob."""
        ...

    def public_url(self, key: str) -> str:
        """URL under which the blob is publicly readable."""
        ...

    async def initialize(self) -> None:
        """Initialize blob storage."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...
