"""Pickle serializer — arbitrary Python objects, trusted storage only."""

from __future__ import annotations

import pickle
from typing import Any

from flatstore.exceptions import SerializationError


class PickleSerializer:
    """Encodes values with :mod:`pickle` at the highest protocol.

    Only point this at storage roots you trust; unpickling runs code.
    """

    def serialize(self, value: Any) -> bytes:
        try:
            return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            raise SerializationError(f"Cannot pickle {type(value).__name__}: {exc}") from exc

    def deserialize(self, data: bytes) -> Any:
        try:
            return pickle.loads(data)
        except (
            pickle.UnpicklingError, EOFError, ValueError, TypeError,
            AttributeError, ImportError, KeyError, IndexError,
        ) as exc:
            raise SerializationError(f"Invalid pickle payload: {exc}") from exc
