"""Tests for FilesystemBlob and SupabaseBlob."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from findr.blob.filesystem import FilesystemBlob
from findr.blob.supabase import SupabaseBlob
from findr.core.exceptions import StorageError
from findr.protocols.blob import BlobStorage

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
async def blob_store(tmp_path):
    """Create an initialized FilesystemBlob."""
    store = FilesystemBlob(root=tmp_path / "blobs")
    await store.initialize()
    yield store
    await store.close()


# =============================================================================
# Filesystem
# =============================================================================


class TestFilesystemBlob:
    """Local photo storage."""

    async def test_put_creates_file(self, blob_store) -> None:
        info = await blob_store.put("u-1/1700000000000.jpg", b"jpeg", "image/jpeg")

        path = blob_store.root / "u-1" / "1700000000000.jpg"
        assert path.read_bytes() == b"jpeg"
        assert info.size == 4
        assert info.content_type == "image/jpeg"
        assert info.etag

    async def test_public_url_is_file_uri(self, blob_store) -> None:
        info = await blob_store.put("u-1/a.png", b"png")
        assert info.public_url.startswith("file://")
        assert info.public_url.endswith("/u-1/a.png")

    async def test_no_upsert(self, blob_store) -> None:
        await blob_store.put("a.jpg", b"1")
        with pytest.raises(StorageError):
            await blob_store.put("a.jpg", b"2")

    async def test_get_and_delete(self, blob_store) -> None:
        await blob_store.put("a.jpg", b"1")
        assert await blob_store.get("a.jpg") == b"1"
        assert await blob_store.delete("a.jpg") is True
        assert await blob_store.get("a.jpg") is None
        assert await blob_store.delete("a.jpg") is False

    async def test_rejects_escaping_keys(self, blob_store) -> None:
        with pytest.raises(StorageError):
            await blob_store.put("../outside.jpg", b"x")

    async def test_protocol(self, blob_store) -> None:
        assert isinstance(blob_store, BlobStorage)


# =============================================================================
# Hosted bucket
# =============================================================================


class TestSupabaseBlob:
    """Hosted bucket over the storage API."""

    async def test_put(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"Key": "animals/u-1/1.jpg"})

        blob = SupabaseBlob("https://abc.supabase.co", "anon", transport=httpx.MockTransport(handler))
        info = await blob.put("u-1/1.jpg", b"jpeg", "image/jpeg")

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/storage/v1/object/animals/u-1/1.jpg"
        assert request.headers["Content-Type"] == "image/jpeg"
        assert request.headers["x-upsert"] == "false"
        assert request.content == b"jpeg"
        assert info.public_url == "https://abc.supabase.co/storage/v1/object/public/animals/u-1/1.jpg"
        await blob.close()

    async def test_put_failure(self) -> None:
        blob = SupabaseBlob(
            "https://abc.supabase.co",
            "anon",
            transport=httpx.MockTransport(lambda r: httpx.Response(409, json={"error": "Duplicate"})),
        )
        with pytest.raises(StorageError):
            await blob.put("u-1/1.jpg", b"jpeg")
        await blob.close()

    async def test_get_missing(self) -> None:
        blob = SupabaseBlob(
            "https://abc.supabase.co",
            "anon",
            transport=httpx.MockTransport(lambda r: httpx.Response(404)),
        )
        assert await blob.get("nope.jpg") is None
        assert await blob.delete("nope.jpg") is False
        await blob.close()

    def test_custom_bucket(self) -> None:
        blob = SupabaseBlob("https://abc.supabase.co/", "anon", bucket="photos")
        assert blob.public_url("k.jpg") == "https://abc.supabase.co/storage/v1/object/public/photos/k.jpg"


def test_filesystem_root_is_path(tmp_path) -> None:
    assert isinstance(FilesystemBlob(root=str(tmp_path)).root, Path)
