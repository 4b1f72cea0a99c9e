"""occ-core — optimistic concurrency control for versioned documents.

Zero infrastructure dependencies. Store adapters live in separate packages.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters.memory import InMemoryDocumentStore

# ── Ports ────────────────────────────────────────────────────────
from .ports import IDocumentStore

# ── Primitives ───────────────────────────────────────────────────
from .primitives.exceptions import (
    ConcurrencyError,
    DuplicateDocumentError,
    InfrastructureError,
    OCCError,
    PersistenceError,
    ValidationError,
    VersionConflictError,
)

# ── Protocol ─────────────────────────────────────────────────────
from .result import UpdateResult, UpdateStatus
from .updater import ConditionalUpdater, insert_versioned, update_if_current
from .versioning import (
    INITIAL_VERSION,
    VERSION_FIELD,
    compose_version_filter,
    compose_version_increment,
    get_version,
    initialize_version,
)

__all__ = [
    # Adapters
    "InMemoryDocumentStore",
    # Ports
    "IDocumentStore",
    # Primitives
    "OCCError",
    "ConcurrencyError",
    "ValidationError",
    "InfrastructureError",
    "PersistenceError",
    "DuplicateDocumentError",
    "VersionConflictError",
    # Protocol
    "UpdateResult",
    "UpdateStatus",
    "ConditionalUpdater",
    "update_if_current",
    "insert_versioned",
    "INITIAL_VERSION",
    "VERSION_FIELD",
    "initialize_version",
    "get_version",
    "compose_version_filter",
    "compose_version_increment",
]
