"""JSON serializer — UTF-8 encoded documents."""

from __future__ import annotations

import json
from typing import Any

from flatstore.exceptions import SerializationError


class JsonSerializer:
    """Encodes values as UTF-8 JSON."""

    def __init__(self, *, indent: int | None = None, sort_keys: bool = False) -> None:
        self._indent = indent
        self._sort_keys = sort_keys

    def serialize(self, value: Any) -> bytes:
        try:
            text = json.dumps(value, ensure_ascii=False, indent=self._indent, sort_keys=self._sort_keys)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Cannot encode {type(value).__name__} as JSON: {exc}") from exc
        return text.encode("utf-8")

    def deserialize(self, data: bytes) -> Any:
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise SerializationError(f"Invalid JSON document: {exc}") from exc
