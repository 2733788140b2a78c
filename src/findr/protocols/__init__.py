"""Findr protocols.

Backends are swapped by implementing these interfaces:

- RowStore: relational table store (hosted, in-memory, SQL)
- BlobStorage: photo uploads
- KeyValueStore: device-local session and credential cache
- ImageClassifier: photo to ClassificationResult
"""

from findr.protocols.blob import BlobInfo, BlobStorage
from findr.protocols.classifier import ImageClassifier
from findr.protocols.keyvalue import KeyValueStore
from findr.protocols.rows import Filter, Row, RowStore

__all__ = [
    "BlobInfo",
    "BlobStorage",
    "Filter",
    "ImageClassifier",
    "KeyValueStore",
    "Row",
    "RowStore",
]
