"""Blob store — documents annotated with filesystem timestamps."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from flatstore.exceptions import ReadError
from flatstore.serializers.protocols import ISerializer
from flatstore.storage.document_store import DocumentStore, is_file, matches
from flatstore.storage.paths import WILDCARD, decode, encode

log = logging.getLogger(__name__)

BLOBS_DIR = "_blobs"


class BlobStore(DocumentStore):
    """Document store that keeps its files under ``<root>/_blobs``.

    ``find`` returns records carrying ``_id``, ``_created`` and
    ``_updated`` fields. Values already present in a stored record win over
    the filesystem-derived ones.
    """

    def __init__(self, storage_path: Path | str, serializer: ISerializer) -> None:
        super().__init__(storage_path, serializer)
        self.blobs_path = self.storage_path / BLOBS_DIR
        self._init_root(self.blobs_path)

    def _path(self, key: str) -> Path:
        return self.blobs_path / encode(key)

    def _scan(self) -> list[Path]:
        return sorted(p for p in self.blobs_path.glob(WILDCARD) if is_file(p))

    def find(self, **filters: Any) -> list[dict[str, Any]] | bool:
        """Return every blob as a metadata-annotated record, ordered by key.

        A single unreadable blob fails the whole scan with ``False``.
        """
        records: list[dict[str, Any]] = []
        paths = self._scan()
        for path in paths:
            try:
                record = self._record(path)
            except ReadError as exc:
                self._report(exc)
                return False
            if matches(record, filters):
                records.append(record)
        log.debug("Found %d of %d blobs in %s", len(records), len(paths), self.blobs_path)
        return records

    def _record(self, path: Path) -> dict[str, Any]:
        key = decode(path.name)
        value = self._read(path)
        record = dict(value) if isinstance(value, Mapping) else {"_value": value}
        try:
            stat = path.stat()
        except OSError as exc:
            raise ReadError(f"Cannot stat {path}: {exc}", key=key) from exc
        record.setdefault("_id", key)
        record.setdefault("_created", int(stat.st_ctime))
        record.setdefault("_updated", int(stat.st_mtime))
        return dict(sorted(record.items(), key=lambda item: str(item[0])))
