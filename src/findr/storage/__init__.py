"""Row store backends.

- MemoryRowStore: in-process dictionaries
- PostgrestRowStore: hosted store over HTTPS
- SQLAlchemyRowStore: any SQLAlchemy database
"""

from findr.storage.factory import create_backends, create_row_store
from findr.storage.memory import MemoryRowStore
from findr.storage.postgrest import PostgrestRowStore
from findr.storage.sqlalchemy_storage import SQLAlchemyRowStore

__all__ = [
    "MemoryRowStore",
    "PostgrestRowStore",
    "SQLAlchemyRowStore",
    "create_backends",
    "create_row_store",
]
