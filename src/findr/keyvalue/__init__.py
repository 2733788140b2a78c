"""Device-local key-value stores."""

from findr.keyvalue.file import FileKeyValueStore
from findr.keyvalue.memory import MemoryKeyValueStore

__all__ = ["FileKeyValueStore", "MemoryKeyValueStore"]
