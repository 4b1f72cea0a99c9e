"""Ports — protocols implemented by infrastructure adapters."""

from .document_store import IDocumentStore

__all__ = ["IDocumentStore"]
