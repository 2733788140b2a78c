"""
Storage factory - pick row and blob backends from settings.

Resolution order:
    1. ``database_url`` set: "memory://" or any SQLAlchemy URL, photos on disk
    2. Hosted store credentials configured: PostgREST + storage bucket
    3. Otherwise: no backend (services degrade to local fallback)

Usage:
    from findr.storage import create_backends

    rows, blobs = create_backends(get_settings())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from findr.blob.filesystem import FilesystemBlob
from findr.blob.supabase import SupabaseBlob
from findr.storage.memory import MemoryRowStore
from findr.storage.postgrest import PostgrestRowStore
from findr.storage.sqlalchemy_storage import SQLAlchemyRowStore

if TYPE_CHECKING:
    from findr.core.config import Settings
    from findr.protocols.blob import BlobStorage
    from findr.protocols.rows import RowStore


def create_row_store(url: str, anon_key: str = "", timeout: float = 30.0) -> RowStore:
    """Create a row store from a URL.

    Example:
        >>> type(create_row_store("memory://")).__name__
        'MemoryRowStore'
        >>> type(create_row_store("sqlite:///findr.db")).__name__
        'SQLAlchemyRowStore'
        >>> type(create_row_store("https://abc.supabase.co", "anon")).__name__
        'PostgrestRowStore'
    """
    if url.startswith("memory://"):
        return MemoryRowStore()
    if url.startswith(("http://", "https://")):
        return PostgrestRowStore(url, anon_key, timeout=timeout)
    return SQLAlchemyRowStore(url)


def create_backends(settings: Settings) -> tuple[RowStore | None, BlobStorage | None]:
    """Row store and blob storage for the configured deployment."""
    if settings.database_url:
        rows = create_row_store(settings.database_url)
        return rows, FilesystemBlob(settings.data_dir / "blobs")

    if settings.store_configured:
        rows = PostgrestRowStore(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.request_timeout,
        )
        blobs = SupabaseBlob(
            settings.supabase_url,
            settings.supabase_anon_key,
            bucket=settings.storage_bucket,
            timeout=settings.request_timeout,
        )
        return rows, blobs

    return None, None
