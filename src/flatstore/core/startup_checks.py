"""Startup validation: fail-fast on storage layouts that would corrupt data."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flatstore.core.config import AppSettings

log = logging.getLogger(__name__)


def validate_settings(settings: AppSettings) -> None:
    """Validate settings before any store is built. Raises ValueError on fatal misconfig."""
    roots = _storage_roots(settings)
    _check_distinct_roots(roots)
    _check_relative_roots(roots)


def _storage_roots(settings: AppSettings) -> dict[str, Path]:
    roots = {
        "storage.documents_path": settings.storage.documents_path,
        "storage.blobs_path": settings.storage.blobs_path,
    }
    for name, index in settings.indexes.items():
        roots[f"indexes.{name}"] = index.storage_path
    return roots


def _check_distinct_roots(roots: dict[str, Path]) -> None:
    """Reject shared or nested roots: a store would scan another's files."""
    resolved = {name: path.expanduser().resolve() for name, path in roots.items()}
    names = sorted(resolved)
    for i, first in enumerate(names):
        for second in names[i + 1:]:
            a, b = resolved[first], resolved[second]
            if a == b or a in b.parents or b in a.parents:
                raise ValueError(
                    f"{first} ({roots[first]}) and {second} ({roots[second]}) overlap. "
                    "Every store and index needs its own storage root."
                )


def _check_relative_roots(roots: dict[str, Path]) -> None:
    """Warn about roots that depend on the working directory."""
    for name, path in roots.items():
        if not path.expanduser().is_absolute():
            log.warning(
                "%s=%s is relative; data location depends on the working directory.",
                name,
                path,
            )
