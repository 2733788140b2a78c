"""Photo reference helpers.

A photo reference is a local path, a ``file://`` URI, or an http(s) URL.

Example:
    >>> from findr.utils.images import content_type_for, file_extension
    >>> file_extension("file:///tmp/IMG_0001.HEIC")
    'heic'
    >>> content_type_for("photo.webp")
    'image/webp'
    >>> content_type_for("photo")
    'image/jpeg'
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from urllib.parse import unquote, urlparse

from findr.http.client import HttpClient

DEFAULT_EXTENSION = "jpg"
DEFAULT_CONTENT_TYPE = "image/jpeg"

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "heic": "image/heic",
    "heif": "image/heif",
}


def file_extension(image_uri: str) -> str:
    """Lower-cased extension of the reference, ``jpg`` when there is none."""
    path = urlparse(image_uri).path or image_uri
    suffix = Path(unquote(path)).suffix.lstrip(".").lower()
    return suffix or DEFAULT_EXTENSION


def content_type_for(image_uri: str) -> str:
    """MIME type inferred from the extension; JPEG when unrecognized."""
    return CONTENT_TYPES.get(file_extension(image_uri), DEFAULT_CONTENT_TYPE)


def is_remote(image_uri: str) -> bool:
    return urlparse(image_uri).scheme in ("http", "https")


def local_path(image_uri: str) -> Path:
    """Filesystem path for a local reference.

    Example:
        >>> str(local_path("file:///tmp/a%20b.jpg"))
        '/tmp/a b.jpg'
    """
    parsed = urlparse(image_uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(image_uri)


async def read_image(image_uri: str, http: HttpClient | None = None) -> bytes:
    """Load the bytes behind a photo reference.

    Raises:
        OSError: Local file missing or unreadable
        HttpClientError: Remote fetch failed
    """
    if is_remote(image_uri):
        if http is None:
            async with HttpClient() as client:
                return await client.get_bytes(image_uri)
        return await http.get_bytes(image_uri)
    return await asyncio.to_thread(local_path(image_uri).read_bytes)
