"""Serializer protocol — the byte boundary between stores and their values."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ISerializer(Protocol):
    """Protocol for value serializers (JSON, pickle, etc.)."""

    def serialize(self, value: Any) -> bytes:
        """Encode a value to bytes. Raises SerializationError on failure."""
        ...

    def deserialize(self, data: bytes) -> Any:
        """Decode bytes back to a value. Raises SerializationError on failure."""
        ...
