"""Pluggable value serializers for document stores."""

from __future__ import annotations

from flatstore.serializers.json_serializer import JsonSerializer
from flatstore.serializers.pickle_serializer import PickleSerializer
from flatstore.serializers.protocols import ISerializer

_SERIALIZERS = {
    "json": JsonSerializer,
    "pickle": PickleSerializer,
}


def create_serializer(name: str, **kwargs) -> ISerializer:
    """Return a serializer instance by name (``"json"`` or ``"pickle"``)."""
    try:
        cls = _SERIALIZERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown serializer {name!r}; expected one of {sorted(_SERIALIZERS)}"
        ) from None
    return cls(**kwargs)


__all__ = ["ISerializer", "JsonSerializer", "PickleSerializer", "create_serializer"]
