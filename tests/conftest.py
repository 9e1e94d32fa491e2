"""Shared fixtures for flatstore tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from flatstore.core.config import AppSettings, IndexConfig, StorageConfig
from flatstore.serializers import JsonSerializer
from flatstore.storage import BlobStore, DocumentStore, Index


@pytest.fixture
def serializer() -> JsonSerializer:
    return JsonSerializer()


@pytest.fixture
def store(tmp_path: Path, serializer: JsonSerializer) -> DocumentStore:
    return DocumentStore(tmp_path / "documents", serializer)


@pytest.fixture
def blob_store(tmp_path: Path, serializer: JsonSerializer) -> BlobStore:
    return BlobStore(tmp_path / "blobs", serializer)


@pytest.fixture
def index(tmp_path: Path) -> Index:
    """Non-unique index."""
    return Index(tmp_path / "idx" / "colors")


@pytest.fixture
def unique_index(tmp_path: Path) -> Index:
    return Index(tmp_path / "idx" / "emails", unique=True)


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    """Settings with every root under ``tmp_path``."""
    return AppSettings(
        storage=StorageConfig(
            documents_path=tmp_path / "documents",
            blobs_path=tmp_path / "blobs",
        ),
        indexes={
            "colors": IndexConfig(storage_path=tmp_path / "idx" / "colors"),
            "emails": IndexConfig(storage_path=tmp_path / "idx" / "emails", unique=True),
        },
    )
