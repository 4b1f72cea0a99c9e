"""In-memory adapters for unit tests and single-process use."""

from .document_store import InMemoryDocumentStore

__all__ = ["InMemoryDocumentStore"]
