"""Photo storage backends."""

from findr.blob.filesystem import FilesystemBlob
from findr.blob.supabase import SupabaseBlob

__all__ = ["FilesystemBlob", "SupabaseBlob"]
