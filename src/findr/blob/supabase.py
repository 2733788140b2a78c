"""Hosted object storage bucket (Supabase Storage API).

Example:
    >>> from findr.blob.supabase import SupabaseBlob
    >>> blob = SupabaseBlob("https://abc.supabase.co", "anon", bucket="animals")
    >>> blob.public_url("u-1/1700000000000.jpg")
    'https://abc.supabase.co/storage/v1/object/public/animals/u-1/1700000000000.jpg'
"""

from __future__ import annotations

import logging

import httpx

from findr.core.exceptions import StorageError
from findr.http.client import HttpClient, HttpClientError, HttpStatusError
from findr.http.supabase import supabase_headers
from findr.protocols.blob import BlobInfo

logger = logging.getLogger(__name__)


class SupabaseBlob:
    """BlobStorage backed by one public bucket of the hosted store."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        *,
        bucket: str = "animals",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._bucket = bucket
        self._http = HttpClient(
            f"{self._url}/storage/v1",
            timeout=timeout,
            headers=supabase_headers(anon_key),
            transport=transport,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    async def initialize(self) -> None:
        """Bucket is provisioned server-side."""

    async def close(self) -> None:
        await self._http.close()

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> BlobInfo:
        try:
            await self._http.post(
                f"/object/{self._bucket}/{key}",
                content=data,
                headers={"Content-Type": content_type, "x-upsert": "false"},
            )
        except HttpClientError as e:
            raise StorageError(f"Upload of {key} failed: {e}") from e

        logger.debug("Uploaded %s (%d bytes) to bucket %s", key, len(data), self._bucket)
        return BlobInfo(
            key=key,
            size=len(data),
            content_type=content_type,
            public_url=self.public_url(key),
        )

    async def get(self, key: str) -> bytes | None:
        try:
            return await self._http.get_bytes(f"/object/{self._bucket}/{key}")
        except HttpStatusError as e:
            if e.status_code in (400, 404):
                return None
            raise StorageError(f"Download of {key} failed: {e}") from e
        except HttpClientError as e:
            raise StorageError(f"Download of {key} failed: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            await self._http.delete(f"/object/{self._bucket}/{key}")
        except HttpStatusError as e:
            if e.status_code in (400, 404):
                return False
            raise StorageError(f"Delete of {key} failed: {e}") from e
        except HttpClientError as e:
            raise StorageError(f"Delete of {key} failed: {e}") from e
        return True

    def public_url(self, key: str) -> str:
        return f"{self._url}/storage/v1/object/public/{self._bucket}/{key}"
