"""flatstore: filesystem-backed document store with secondary indexes.

Public API::

    from flatstore import (
        AppSettings, IndexConfig,
        DocumentStore, BlobStore, Index,
        JsonSerializer, PickleSerializer,
        create_document_store, create_blob_store, create_index,
    )
"""

from __future__ import annotations

from flatstore.core.config import AppSettings, IndexConfig
from flatstore.exceptions import (
    ConflictError,
    DeleteError,
    FlatStoreError,
    NotFoundError,
    ReadError,
    SerializationError,
    StorageInitError,
    UniquenessViolation,
    WriteError,
)
from flatstore.serializers import JsonSerializer, PickleSerializer
from flatstore.storage import BlobStore, DocumentStore, Index
from flatstore.storage.factory import create_blob_store, create_document_store, create_index

__all__ = [
    "AppSettings",
    "IndexConfig",
    "DocumentStore",
    "BlobStore",
    "Index",
    "JsonSerializer",
    "PickleSerializer",
    "create_document_store",
    "create_blob_store",
    "create_index",
    "FlatStoreError",
    "StorageInitError",
    "ReadError",
    "WriteError",
    "DeleteError",
    "ConflictError",
    "UniquenessViolation",
    "NotFoundError",
    "SerializationError",
]
