"""Tests for building stores and indexes from settings."""

from __future__ import annotations

import pytest

from flatstore.core.config import AppSettings
from flatstore.serializers import JsonSerializer, PickleSerializer
from flatstore.storage import BlobStore, DocumentStore, Index
from flatstore.storage.factory import (
    create_blob_store,
    create_document_store,
    create_index,
    create_serializer,
)


class TestFactory:
    def test_document_store(self, settings: AppSettings) -> None:
        store = create_document_store(settings)
        assert isinstance(store, DocumentStore)
        assert store.storage_path == settings.storage.documents_path
        assert isinstance(store.serializer, JsonSerializer)

    def test_blob_store(self, settings: AppSettings) -> None:
        store = create_blob_store(settings)
        assert isinstance(store, BlobStore)
        assert store.blobs_path == settings.storage.blobs_path / "_blobs"

    def test_pickle_serializer(self, settings: AppSettings) -> None:
        settings.storage.serializer = "pickle"
        assert isinstance(create_serializer(settings), PickleSerializer)

    def test_json_indent(self, settings: AppSettings) -> None:
        settings.storage.json_indent = 2
        store = create_document_store(settings)
        store.set("k", {"a": 1})
        assert (store.storage_path / "k").read_text() == '{\n  "a": 1\n}'

    def test_indexes_by_name(self, settings: AppSettings) -> None:
        colors = create_index(settings, "colors")
        emails = create_index(settings, "emails")
        assert isinstance(colors, Index)
        assert colors.is_unique is False
        assert emails.is_unique is True
        assert emails.storage_path == settings.indexes["emails"].storage_path

    def test_unknown_index(self, settings: AppSettings) -> None:
        with pytest.raises(KeyError, match="No index named 'tags'"):
            create_index(settings, "tags")
