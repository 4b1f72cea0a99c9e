"""Primitives — exception hierarchy shared by every occ package."""

from .exceptions import (
    ConcurrencyError,
    DuplicateDocumentError,
    InfrastructureError,
    OCCError,
    PersistenceError,
    ValidationError,
    VersionConflictError,
)

__all__ = [
    "OCCError",
    "ConcurrencyError",
    "ValidationError",
    "InfrastructureError",
    "PersistenceError",
    "DuplicateDocumentError",
    "VersionConflictError",
]
