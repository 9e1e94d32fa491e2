"""Store and index factory — builds components from explicit settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flatstore.serializers import ISerializer
from flatstore.serializers import create_serializer as _serializer_by_name
from flatstore.storage.blob_store import BlobStore
from flatstore.storage.document_store import DocumentStore
from flatstore.storage.index import Index

if TYPE_CHECKING:
    from flatstore.core.config import AppSettings

log = logging.getLogger(__name__)


def create_serializer(settings: AppSettings) -> ISerializer:
    """Create the serializer named by ``settings.storage.serializer``."""
    name = settings.storage.serializer
    if name == "json":
        return _serializer_by_name("json", indent=settings.storage.json_indent)
    return _serializer_by_name(name)


def create_document_store(settings: AppSettings) -> DocumentStore:
    """Create the document store rooted at ``settings.storage.documents_path``.

    Raises:
        StorageInitError: If the storage root cannot be created.
    """
    log.info("Opening document store at %s", settings.storage.documents_path)
    return DocumentStore(settings.storage.documents_path, create_serializer(settings))


def create_blob_store(settings: AppSettings) -> BlobStore:
    """Create the blob store rooted at ``settings.storage.blobs_path``."""
    log.info("Opening blob store at %s", settings.storage.blobs_path)
    return BlobStore(settings.storage.blobs_path, create_serializer(settings))


def create_index(settings: AppSettings, name: str) -> Index:
    """Create the index configured under ``settings.indexes[name]``.

    Raises:
        KeyError: If no index named ``name`` is configured.
        StorageInitError: If the index root cannot be created.
    """
    try:
        config = settings.indexes[name]
    except KeyError:
        raise KeyError(
            f"No index named {name!r}; configured: {sorted(settings.indexes)}"
        ) from None
    log.info("Opening %s index %r at %s", "unique" if config.unique else "non-unique", name, config.storage_path)
    return Index(config.storage_path, unique=config.unique)
