"""Secondary index stored as ``value/document_key`` marker files.

Each entry is an empty file at ``root/encode(value)/encode(document_key)``;
its existence is the whole record. Value directories are created on
demand and removed, best-effort, once their last entry is gone.

Querying with ``*`` in either position globs over that level::

    index.get("doc1")        # values indexed for doc1
    index.get("*", "red")    # document keys indexed under "red"

``add`` and ``set`` never roll back: if a multi-value call fails half way,
the entries it already created stay. ``set`` creates new entries before
removing stale ones, so a concurrent reader sees a superset of the
document's values, never a gap.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from flatstore.exceptions import (
    ConflictError,
    DeleteError,
    FlatStoreError,
    UniquenessViolation,
    WriteError,
)
from flatstore.storage.document_store import DocumentStore, ensure_dir, is_file
from flatstore.storage.paths import WILDCARD, decode, encode, entry_path

log = logging.getLogger(__name__)


def normalize(values: Any) -> set[str]:
    """Coerce a single value or an iterable of values to a set of strings.

    ``None`` means no values. Strings and bytes count as one value; bytes
    are decoded as UTF-8.
    """
    if values is None:
        return set()
    if isinstance(values, (str, bytes, bytearray)) or not isinstance(values, Iterable):
        values = [values]
    return {_as_text(v) for v in values}


def _as_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


class Index(DocumentStore):
    """Filesystem secondary index, optionally enforcing unique values.

    Mutating calls on one instance are serialized by an instance lock.
    Nothing coordinates separate instances or processes sharing a root.
    """

    def __init__(self, storage_path: Path | str, *, unique: bool = False) -> None:
        self.storage_path = Path(storage_path)
        # Entries are empty marker files; there is nothing to deserialize.
        self.serializer = None
        self._unique = bool(unique)
        self._lock = threading.RLock()
        self._init_root(self.storage_path)

    @property
    def is_unique(self) -> bool:
        return self._unique

    def _path(self, key: str) -> Path:
        # ``key`` is an already-encoded ``value/document_key`` entry path
        return self.storage_path / key

    def _glob(self, document_key: str, value: str) -> list[Path]:
        pattern = entry_path(document_key, value)
        try:
            return sorted(p for p in self.storage_path.glob(pattern) if is_file(p))
        except OSError:
            # A segment the OS cannot name holds no entries
            return []

    # ── Queries ───────────────────────────────────────────────────────

    def exists(self, document_key: str, value: str = WILDCARD) -> bool:
        """True if at least one entry matches ``(document_key, value)``."""
        return bool(self._glob(document_key, value))

    def get(self, document_key: str, value: str = WILDCARD) -> set[str]:
        """Return the segments left open by the query.

        Document keys when ``document_key`` is the wildcard, indexed values
        otherwise. Always a set, empty when nothing matches.
        """
        rows = self._glob(document_key, value)
        if document_key == WILDCARD:
            return {decode(row.name) for row in rows}
        return {decode(row.parent.name) for row in rows}

    def keys(self) -> list[str]:
        """Return the sorted document keys holding at least one entry."""
        return sorted(self.get(WILDCARD))

    def find(self, **filters: Any) -> None:
        """Not supported on indexes; logs a warning and returns ``None``."""
        log.warning("%s.find() is not supported; use get() with '*' wildcards", type(self).__name__)
        return None

    # ── Mutations ─────────────────────────────────────────────────────

    def add(self, document_key: str, values: Any) -> bool:
        """Index new values for ``document_key``.

        Fails if any value is already indexed for this key, or (unique
        index) already claimed by another key.
        """
        candidates = normalize(values)
        with self._lock:
            try:
                duplicates = candidates & self.get(document_key)
                if duplicates:
                    raise ConflictError(
                        f"{document_key!r} already indexes {sorted(duplicates)}",
                        key=document_key,
                    )
                self._prepare(candidates)
                for value in sorted(candidates):
                    self._insert(document_key, value)
            except FlatStoreError as exc:
                self._report(exc)
                return False
        return True

    def set(self, document_key: str, values: Any) -> bool:
        """Make ``values`` the exact set indexed for ``document_key``."""
        target = normalize(values)
        with self._lock:
            try:
                self._prepare(target)
                stored = self.get(document_key)
                for value in sorted(target - stored):
                    self._insert(document_key, value)
                for value in sorted(stored - target):
                    self._remove(document_key, value)
            except FlatStoreError as exc:
                self._report(exc)
                return False
        log.debug("Indexed %s -> %s", document_key, sorted(target))
        return True

    def delete(self, document_key: str, value: str = WILDCARD) -> bool:
        """Remove every entry matching ``(document_key, value)``."""
        with self._lock:
            try:
                self._remove(document_key, value)
            except DeleteError as exc:
                self._report(exc)
                return False
        return True

    # ── Helpers (raise typed errors) ──────────────────────────────────

    def _prepare(self, values: set[str]) -> None:
        """Create the value directory of every value."""
        for value in values:
            directory = self.storage_path / encode(value)
            try:
                ensure_dir(directory)
            except OSError as exc:
                raise WriteError(f"Cannot create {directory}: {exc}", key=value) from exc

    def _insert(self, document_key: str, value: str) -> None:
        if self._unique:
            owners = self.get(WILDCARD, value)
            if owners:
                owner = sorted(owners)[0]
                raise UniquenessViolation(
                    f"Value {value!r} is already claimed by {owner!r}",
                    key=document_key,
                    value=value,
                    owner=owner,
                )
        self._write(self._path(entry_path(document_key, value)), b"")

    def _remove(self, document_key: str, value: str) -> None:
        rows = self._glob(document_key, value)
        for row in rows:
            self._unlink(row)
        for directory in {row.parent for row in rows}:
            # Still holding other keys' entries, or already gone
            with contextlib.suppress(OSError):
                directory.rmdir()
