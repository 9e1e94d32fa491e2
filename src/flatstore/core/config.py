"""Nested pydantic-settings configuration for flatstore.

Each group reads its own ``FLATSTORE_<GROUP>_*`` env vars::

    export FLATSTORE_STORAGE_DOCUMENTS_PATH=/var/lib/flatstore/documents
    export FLATSTORE_STORAGE_SERIALIZER=pickle
    export FLATSTORE_INDEXES='{"email": {"storage_path": "/var/lib/flatstore/idx/email", "unique": true}}'
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class StorageConfig(BaseSettings):
    """Document and blob store configuration.

    Env vars use ``FLATSTORE_STORAGE_`` prefix.
    """

    model_config = {"env_prefix": "FLATSTORE_STORAGE_"}

    documents_path: Path = Path("./data/documents")
    blobs_path: Path = Path("./data/blobs")
    serializer: Literal["json", "pickle"] = "json"
    json_indent: int | None = Field(default=None, ge=0, le=8)


class IndexConfig(BaseModel):
    """One secondary index: where it lives and whether values are unique."""

    storage_path: Path
    unique: bool = False


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``FLATSTORE_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "FLATSTORE_OBSERVABILITY_"}

    log_level: str = "INFO"
    json_logs: bool = False


class AppSettings(BaseSettings):
    """Top-level settings aggregating all sub-configs.

    ``indexes`` maps an index name to its :class:`IndexConfig`; it is read
    from the ``FLATSTORE_INDEXES`` env var as JSON.
    """

    model_config = {"env_prefix": "FLATSTORE_"}

    storage: StorageConfig = Field(default_factory=StorageConfig)
    indexes: dict[str, IndexConfig] = Field(default_factory=dict)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
