"""Flat-file document stores and secondary indexes."""

from __future__ import annotations

from flatstore.storage.blob_store import BlobStore
from flatstore.storage.document_store import DocumentStore
from flatstore.storage.index import Index

__all__ = ["DocumentStore", "BlobStore", "Index"]
