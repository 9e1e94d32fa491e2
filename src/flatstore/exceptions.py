"""Exception hierarchy for flatstore.

Internal helpers raise these; the public store and index methods catch
them at their boundary and translate them into ``False`` / ``None``
results.
"""

from __future__ import annotations


class FlatStoreError(Exception):
    """Base exception for all flatstore errors."""

    def __init__(self, message: str, *, key: str = "") -> None:
        super().__init__(message)
        self.key = key


class StorageInitError(FlatStoreError):
    """Raised when a storage root cannot be created. Fatal."""


class ReadError(FlatStoreError):
    """An existing file could not be read or decoded."""


class WriteError(FlatStoreError):
    """A file could not be written."""


class DeleteError(FlatStoreError):
    """An existing file could not be unlinked."""


class ConflictError(FlatStoreError):
    """The key (or index entry) already exists."""


class UniquenessViolation(ConflictError):
    """A unique index value is already claimed by another document key."""

    def __init__(self, message: str, *, key: str = "", value: str = "", owner: str = "") -> None:
        super().__init__(message, key=key)
        self.value = value
        self.owner = owner


class NotFoundError(FlatStoreError):
    """The key does not exist."""


class SerializationError(FlatStoreError):
    """A serializer failed to encode or decode a value."""


__all__ = [
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
