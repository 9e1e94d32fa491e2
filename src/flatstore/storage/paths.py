"""Filesystem-safe key encoding with a literal ``*`` wildcard.

Keys and index values are form-style percent-encoded so any string maps
to a single path segment. ``*`` alone is left as-is, so an encoded
pattern doubles as a glob that matches every segment at that level.
"""

from __future__ import annotations

from urllib.parse import quote_plus, unquote_plus

WILDCARD = "*"

# "." and ".." survive quote_plus but name the current/parent directory
_RESERVED = {".": "%2E", "..": "%2E%2E"}


def encode(segment: str) -> str:
    """Encode one path segment, passing the wildcard through."""
    segment = str(segment)
    if segment == WILDCARD:
        return WILDCARD
    if not segment:
        raise ValueError("Keys and index values must be non-empty strings")
    encoded = quote_plus(segment, safe="")
    return _RESERVED.get(encoded, encoded)


def decode(segment: str) -> str:
    """Inverse of :func:`encode` for real (non-wildcard) segments."""
    return unquote_plus(segment)


def entry_path(document_key: str, value: str) -> str:
    """Return the ``value/document_key`` relative path of an index entry."""
    return f"{encode(value)}/{encode(document_key)}"
