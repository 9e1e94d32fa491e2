"""File-per-key document store — one serialized file per document key."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from flatstore.exceptions import (
    DeleteError,
    FlatStoreError,
    ReadError,
    SerializationError,
    StorageInitError,
    WriteError,
)
from flatstore.serializers.protocols import ISerializer
from flatstore.storage.paths import WILDCARD, decode, encode

log = logging.getLogger(__name__)

# Permissive default; the process umask narrows it.
DIR_MODE = 0o777


def ensure_dir(path: Path) -> None:
    """Create ``path`` and its parents if missing (idempotent)."""
    path.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)


def is_file(path: Path) -> bool:
    """Like ``Path.is_file``, but a name the OS rejects (e.g. too long) is absent."""
    try:
        return path.is_file()
    except OSError:
        return False


class DocumentStore:
    """Stores serialized documents as files under a storage root.

    Public methods never raise for I/O trouble. They return the tri-state
    results callers rely on: the key (or ``True``) on success, ``None``
    when there was nothing to act on, ``False`` on failure. Failures are
    logged at warning level.
    """

    def __init__(self, storage_path: Path | str, serializer: ISerializer) -> None:
        self.storage_path = Path(storage_path)
        self.serializer = serializer
        self._init_root(self.storage_path)

    @staticmethod
    def _init_root(path: Path) -> None:
        try:
            ensure_dir(path)
        except OSError as exc:
            raise StorageInitError(f"Cannot create storage root {path}: {exc}") from exc

    def _path(self, key: str) -> Path:
        """Return the file path backing ``key``."""
        return self.storage_path / encode(key)

    # ── Low-level I/O (raise typed errors) ────────────────────────────

    def _read_raw(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise ReadError(f"Cannot read {path}: {exc}", key=path.name) from exc

    def _read(self, path: Path) -> Any:
        data = self._read_raw(path)
        try:
            return self.serializer.deserialize(data)
        except SerializationError as exc:
            raise ReadError(f"Cannot decode {path}: {exc}", key=path.name) from exc

    def _write(self, path: Path, data: bytes) -> None:
        try:
            ensure_dir(path.parent)
            path.write_bytes(data)
        except OSError as exc:
            raise WriteError(f"Cannot write {path}: {exc}", key=path.name) from exc

    def _unlink(self, path: Path) -> None:
        try:
            path.unlink()
        except OSError as exc:
            raise DeleteError(f"Cannot delete {path}: {exc}", key=path.name) from exc

    @staticmethod
    def _report(exc: FlatStoreError) -> None:
        log.warning("%s: %s", type(exc).__name__, exc)

    # ── Public contract ───────────────────────────────────────────────

    def exists(self, key: str) -> bool:
        return is_file(self._path(key))

    def get(self, key: str) -> Any:
        """Return the stored value, ``None`` if absent, ``False`` if unreadable."""
        path = self._path(key)
        if not is_file(path):
            return None
        try:
            return self._read(path)
        except ReadError as exc:
            self._report(exc)
            return False

    def set(self, key: str, value: Any) -> str | bool:
        """Write ``value`` under ``key``, overwriting. Returns ``key`` or ``False``."""
        path = self._path(key)
        try:
            try:
                data = self.serializer.serialize(value)
            except SerializationError as exc:
                raise WriteError(f"Cannot encode value for {key!r}: {exc}", key=key) from exc
            self._write(path, data)
        except WriteError as exc:
            self._report(exc)
            return False
        log.debug("Saved %s to %s", key, path)
        return key

    def add(self, key: str, value: Any) -> str | bool:
        """Like :meth:`set`, but fails when ``key`` already exists."""
        if self.exists(key):
            log.debug("ConflictError: key %r already exists", key)
            return False
        return self.set(key, value)

    def replace(self, key: str, value: Any) -> str | bool | None:
        """Like :meth:`set`, but returns ``None`` when ``key`` does not exist."""
        if not self.exists(key):
            return None
        return self.set(key, value)

    def delete(self, key: str) -> bool | None:
        """Remove ``key``: ``True`` deleted, ``None`` absent, ``False`` failed."""
        if not self.exists(key):
            return None
        try:
            self._unlink(self._path(key))
        except DeleteError as exc:
            self._report(exc)
            return False
        log.debug("Deleted %s", key)
        return True

    def keys(self) -> list[str]:
        """Return the sorted keys of all stored documents."""
        return sorted(decode(path.name) for path in self._scan())

    def _scan(self) -> list[Path]:
        return sorted(p for p in self.storage_path.glob(encode(WILDCARD)) if is_file(p))

    def find(self, *, raw: bool = False, **filters: Any) -> dict[str, Any] | bool:
        """Return every document as ``{key: value}``.

        Keyword ``filters`` keep only mapping documents whose items equal
        every filter. With ``raw=True`` the undecoded bytes are returned
        and filters are ignored. A single unreadable file fails the whole
        scan with ``False``.
        """
        results: dict[str, Any] = {}
        for path in self._scan():
            key = decode(path.name)
            try:
                if raw:
                    results[key] = self._read_raw(path)
                    continue
                value = self._read(path)
            except ReadError as exc:
                self._report(exc)
                return False
            if matches(value, filters):
                results[key] = value
        return results


def matches(value: Any, filters: Mapping[str, Any]) -> bool:
    """True if ``value`` is a mapping containing every ``filters`` item."""
    if not filters:
        return True
    if not isinstance(value, Mapping):
        return False
    return all(field in value and value[field] == expected for field, expected in filters.items())
