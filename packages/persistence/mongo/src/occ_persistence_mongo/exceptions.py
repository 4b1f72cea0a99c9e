"""Errors raised by the MongoDB adapter itself.

Driver errors (``pymongo.errors.*``) are not wrapped; they reach callers
unchanged, or as the error of a store-failure result.
"""

from __future__ import annotations

from typing import Any

from occ_core.primitives.exceptions import PersistenceError


class MongoPersistenceError(PersistenceError):
    """Base for errors raised by occ_persistence_mongo."""


class MongoConnectionError(MongoPersistenceError):
    """The Motor client is missing, not yet connected, or cannot be created."""


class DocumentMappingError(MongoPersistenceError):
    """A stored document does not validate against its model."""

    def __init__(self, model_name: str, document_id: Any, reason: str) -> None:
        self.model_name = model_name
        self.document_id = document_id
        super().__init__(
            f"Cannot map document {document_id!r} to {model_name}: {reason}"
        )
