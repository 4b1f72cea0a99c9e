"""MongoDB persistence for optimistic concurrency control.

Provides the Motor-backed document store used by ``occ_core.update_if_current``,
a versioned repository for pydantic models, and version-field migrations.
"""

from __future__ import annotations

from .connection import MongoConnectionManager
from .exceptions import (
    DocumentMappingError,
    MongoConnectionError,
    MongoPersistenceError,
)
from .migrations import backfill_version_field, ensure_version_index
from .model_mapper import MongoDBModelMapper
from .models import VersionedModel
from .repository import MongoVersionedRepository
from .store import MongoDocumentStore

__all__ = [
    # Core
    "MongoConnectionManager",
    "MongoDocumentStore",
    "MongoVersionedRepository",
    "VersionedModel",
    # Utilities
    "MongoDBModelMapper",
    "backfill_version_field",
    "ensure_version_index",
    # Exceptions
    "MongoPersistenceError",
    "MongoConnectionError",
    "DocumentMappingError",
]
