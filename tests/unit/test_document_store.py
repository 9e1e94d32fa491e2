"""Tests for DocumentStore — file-per-key get/set/add/replace/delete/find."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import pytest

from flatstore.exceptions import StorageInitError
from flatstore.serializers import JsonSerializer
from flatstore.storage import DocumentStore
from tests.fakes.fake_serializer import BrokenSerializer, RecordingSerializer


class TestInit:
    def test_creates_missing_root(self, tmp_path: Path) -> None:
        root = tmp_path / "a" / "b" / "docs"
        DocumentStore(root, JsonSerializer())
        assert root.is_dir()

    def test_existing_root_is_reused(self, tmp_path: Path) -> None:
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "k").write_bytes(b'"v"')
        store = DocumentStore(tmp_path / "docs", JsonSerializer())
        assert store.get("k") == "v"

    def test_root_blocked_by_file_is_fatal(self, tmp_path: Path) -> None:
        blocker = tmp_path / "docs"
        blocker.write_text("not a directory")
        with pytest.raises(StorageInitError, match="Cannot create storage root"):
            DocumentStore(blocker, JsonSerializer())


class TestGetSet:
    def test_round_trip(self, store: DocumentStore) -> None:
        doc = {"title": "Hello", "tags": ["a", "b"], "count": 2}
        assert store.set("doc1", doc) == "doc1"
        assert store.get("doc1") == doc

    def test_set_overwrites(self, store: DocumentStore) -> None:
        store.set("doc1", {"v": 1})
        store.set("doc1", {"v": 2})
        assert store.get("doc1") == {"v": 2}

    def test_get_absent_is_none(self, store: DocumentStore) -> None:
        assert store.get("missing") is None

    def test_file_holds_serialized_bytes(self, store: DocumentStore) -> None:
        store.set("doc1", [1, 2])
        assert (store.storage_path / "doc1").read_bytes() == b"[1, 2]"

    def test_special_character_keys(self, store: DocumentStore) -> None:
        store.set("users/42 a+b", {"ok": True})
        assert (store.storage_path / "users%2F42+a%2Bb").is_file()
        assert store.get("users/42 a+b") == {"ok": True}
        assert store.exists("users/42 a+b")

    @pytest.mark.parametrize("key", [".", "..", "*x", "[0]"])
    def test_keys_stay_inside_root(self, store: DocumentStore, key: str) -> None:
        assert store.set(key, "v") == key
        assert store.get(key) == "v"
        assert [p.parent for p in store.storage_path.iterdir()] == [store.storage_path]

    def test_set_recreates_removed_root(self, store: DocumentStore) -> None:
        shutil.rmtree(store.storage_path)
        assert store.set("doc1", 1) == "doc1"
        assert store.get("doc1") == 1

    def test_unreadable_document(self, store: DocumentStore, caplog: pytest.LogCaptureFixture) -> None:
        (store.storage_path / "bad").write_bytes(b"{corrupt")
        with caplog.at_level(logging.WARNING, logger="flatstore"):
            assert store.get("bad") is False
        assert "ReadError" in caplog.text

    def test_write_failure(self, store: DocumentStore, caplog: pytest.LogCaptureFixture) -> None:
        (store.storage_path / "doc1").mkdir()
        with caplog.at_level(logging.WARNING, logger="flatstore"):
            assert store.set("doc1", {"v": 1}) is False
        assert "WriteError" in caplog.text

    def test_unserializable_value(self, store: DocumentStore, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="flatstore"):
            assert store.set("doc1", {"v": object()}) is False
        assert not store.exists("doc1")
        assert "WriteError" in caplog.text

    def test_serializer_is_injected(self, tmp_path: Path) -> None:
        serializer = RecordingSerializer()
        store = DocumentStore(tmp_path / "docs", serializer)
        store.set("k", "value")
        assert store.get("k") == "value"
        assert serializer.serialized == ["value"]
        assert serializer.deserialized == [b"value"]


class TestAddReplace:
    def test_add_new_key(self, store: DocumentStore) -> None:
        assert store.add("doc1", {"v": 1}) == "doc1"
        assert store.get("doc1") == {"v": 1}

    def test_add_existing_key_conflicts(self, store: DocumentStore) -> None:
        store.set("doc1", {"v": 1})
        assert store.add("doc1", {"v": 2}) is False
        assert store.get("doc1") == {"v": 1}

    def test_replace_absent_is_none(self, store: DocumentStore) -> None:
        assert store.replace("doc1", {"v": 1}) is None
        assert not store.exists("doc1")

    def test_replace_existing(self, store: DocumentStore) -> None:
        store.set("doc1", {"v": 1})
        assert store.replace("doc1", {"v": 2}) == "doc1"
        assert store.get("doc1") == {"v": 2}


class TestDelete:
    def test_delete_existing(self, store: DocumentStore) -> None:
        store.set("doc1", 1)
        assert store.delete("doc1") is True
        assert store.get("doc1") is None
        assert not store.exists("doc1")

    def test_delete_absent_is_none(self, store: DocumentStore) -> None:
        assert store.delete("missing") is None

    def test_delete_failure(
        self,
        store: DocumentStore,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        store.set("doc1", 1)

        def _refuse(self: Path, missing_ok: bool = False) -> None:
            raise PermissionError("read-only filesystem")

        monkeypatch.setattr(Path, "unlink", _refuse)
        with caplog.at_level(logging.WARNING, logger="flatstore"):
            assert store.delete("doc1") is False
        assert "DeleteError" in caplog.text
        monkeypatch.undo()
        assert store.exists("doc1")


class TestFind:
    def test_find_all(self, store: DocumentStore) -> None:
        store.set("a", {"color": "red"})
        store.set("b c", {"color": "blue"})
        assert store.find() == {"a": {"color": "red"}, "b c": {"color": "blue"}}

    def test_find_empty_store(self, store: DocumentStore) -> None:
        assert store.find() == {}

    def test_find_with_filters(self, store: DocumentStore) -> None:
        store.set("a", {"color": "red", "size": 1})
        store.set("b", {"color": "red", "size": 2})
        store.set("c", {"color": "blue", "size": 1})
        store.set("d", ["not", "a", "mapping"])
        assert set(store.find(color="red")) == {"a", "b"}
        assert set(store.find(color="red", size=1)) == {"a"}
        assert store.find(missing="x") == {}

    def test_find_raw(self, store: DocumentStore) -> None:
        store.set("a", {"x": 1})
        assert store.find(raw=True) == {"a": b'{"x": 1}'}

    def test_find_skips_subdirectories(self, store: DocumentStore) -> None:
        store.set("a", 1)
        (store.storage_path / "nested").mkdir()
        assert store.find() == {"a": 1}
        assert store.keys() == ["a"]

    def test_one_bad_file_fails_whole_scan(
        self, store: DocumentStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        store.set("a", 1)
        store.set("z", 2)
        (store.storage_path / "m").write_bytes(b"{corrupt")
        with caplog.at_level(logging.WARNING, logger="flatstore"):
            assert store.find() is False
        assert "ReadError" in caplog.text

    def test_keys_sorted_and_decoded(self, store: DocumentStore) -> None:
        for key in ("b", "a/1", "c d"):
            store.set(key, 0)
        assert store.keys() == ["a/1", "b", "c d"]


class TestBrokenSerializer:
    def test_every_write_fails(self, tmp_path: Path) -> None:
        store = DocumentStore(tmp_path / "docs", BrokenSerializer())
        assert store.set("k", 1) is False
        assert store.add("k", 1) is False
        assert not store.exists("k")

    def test_every_read_fails(self, tmp_path: Path) -> None:
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "k").write_bytes(b"anything")
        store = DocumentStore(tmp_path / "docs", BrokenSerializer())
        assert store.get("k") is False
        assert store.find() is False
        assert store.find(raw=True) == {"k": b"anything"}


class TestLongKeys:
    # 60 two-byte characters percent-encode to 360 bytes, past the 255-byte name limit
    KEY = "é" * 60

    def test_unstorable_key_reads_as_absent(
        self, store: DocumentStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="flatstore"):
            assert store.set(self.KEY, {"v": 1}) is False
        assert "WriteError" in caplog.text
        assert store.exists(self.KEY) is False
        assert store.get(self.KEY) is None
        assert store.delete(self.KEY) is None
        assert store.replace(self.KEY, 2) is None
        assert store.add(self.KEY, 2) is False
        assert store.keys() == []
