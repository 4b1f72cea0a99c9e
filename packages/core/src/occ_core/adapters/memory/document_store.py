"""InMemoryDocumentStore — dict-backed fake of an atomic document store."""

from __future__ import annotations

import asyncio
import copy
import uuid
from typing import Any

from occ_core.primitives.exceptions import DuplicateDocumentError

_MISSING = object()


class InMemoryDocumentStore:
    """In-memory implementation of ``IDocumentStore``.

    Documents are kept in a dict keyed by ``_id``. Filters are top-level
    equality constraints; updates support ``$set``, ``$unset`` and ``$inc``.
    A single lock serializes writes, so racing conditional updates behave
    as they would against a real store: one wins, the rest match nothing.
    """

    SUPPORTED_OPERATORS = frozenset({"$set", "$unset", "$inc"})

    def __init__(self, documents: list[dict[str, Any]] | None = None) -> None:
        self._documents: dict[Any, dict[str, Any]] = {}
        self._lock = asyncio.Lock()
        for doc in documents or []:
            self._put(copy.deepcopy(doc))

    def __len__(self) -> int:
        return len(self._documents)

    def snapshot(self, doc_id: Any) -> dict[str, Any] | None:
        """Synchronous copy of a stored document, for assertions."""
        doc = self._documents.get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def find_one_and_update(
        self,
        filter: dict[str, Any],  # noqa: A002
        update: dict[str, Any],
        *,
        session: Any = None,  # noqa: ARG002
        max_time_ms: int | None = None,  # noqa: ARG002
    ) -> dict[str, Any] | None:
        self._check_update(update)
        # Yield once so concurrent callers interleave before the lock.
        await asyncio.sleep(0)
        async with self._lock:
            doc = self._match_one(filter)
            if doc is None:
                return None
            # Mutate a copy and swap it in so a failing operator writes nothing.
            updated = copy.deepcopy(doc)
            self._apply(updated, update)
            self._documents[updated["_id"]] = updated
            return copy.deepcopy(updated)

    async def insert_one(
        self,
        document: dict[str, Any],
        *,
        session: Any = None,  # noqa: ARG002
    ) -> Any:
        async with self._lock:
            doc = copy.deepcopy(document)
            return self._put(doc)

    async def find_one(
        self,
        filter: dict[str, Any],  # noqa: A002
        *,
        session: Any = None,  # noqa: ARG002
    ) -> dict[str, Any] | None:
        doc = self._match_one(filter)
        return copy.deepcopy(doc) if doc is not None else None

    # ── Internals ────────────────────────────────────────────────

    def _put(self, doc: dict[str, Any]) -> Any:
        doc_id = doc.setdefault("_id", uuid.uuid4().hex)
        if doc_id in self._documents:
            raise DuplicateDocumentError(f"Document with _id={doc_id!r} already exists")
        self._documents[doc_id] = doc
        return doc_id

    def _match_one(self, filter_: dict[str, Any]) -> dict[str, Any] | None:
        if "_id" in filter_:
            candidates = [self._documents.get(filter_["_id"])]
        else:
            candidates = list(self._documents.values())
        for doc in candidates:
            if doc is None:
                continue
            if all(doc.get(key, _MISSING) == value for key, value in filter_.items()):
                return doc
        return None

    def _check_update(self, update: dict[str, Any]) -> None:
        unsupported = set(update) - self.SUPPORTED_OPERATORS
        if unsupported:
            raise ValueError(f"Unsupported update operators: {sorted(unsupported)}")
        for field in update.get("$inc", {}).values():
            if not isinstance(field, (int, float)) or isinstance(field, bool):
                raise ValueError("$inc expects numeric amounts")

    @staticmethod
    def _apply(doc: dict[str, Any], update: dict[str, Any]) -> None:
        for key, value in update.get("$set", {}).items():
            doc[key] = copy.deepcopy(value)
        for key in update.get("$unset", {}):
            doc.pop(key, None)
        for key, amount in update.get("$inc", {}).items():
            current = doc.get(key, 0)
            if not isinstance(current, (int, float)) or isinstance(current, bool):
                raise ValueError(f"Cannot apply $inc to non-numeric field {key!r}")
            doc[key] = current + amount
