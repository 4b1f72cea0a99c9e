"""IDocumentStore — protocol for document stores with atomic find-and-modify."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IDocumentStore(Protocol):
    """Minimal document-store surface used by the conditional updater.

    Implementations must apply ``find_one_and_update`` atomically: the
    match and the mutation are indivisible, so concurrent conditional
    updates to the same document are serialized by the store.
    """

    async def find_one_and_update(
        self,
        filter: dict[str, Any],  # noqa: A002
        update: dict[str, Any],
        *,
        session: Any = None,
        max_time_ms: int | None = None,
    ) -> dict[str, Any] | None:
        """Update one matching document and return its post-image.

        Returns None when no document matched ``filter``. Any other failure
        (transport, timeout, malformed update, permissions) is raised.
        """
        ...

    async def insert_one(
        self,
        document: dict[str, Any],
        *,
        session: Any = None,
    ) -> Any:
        """Insert ``document`` and return its ``_id``."""
        ...

    async def find_one(
        self,
        filter: dict[str, Any],  # noqa: A002
        *,
        session: Any = None,
    ) -> dict[str, Any] | None:
        """Return one matching document or None."""
        ...
