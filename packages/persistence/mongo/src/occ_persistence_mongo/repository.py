"""MongoVersionedRepository[T] — optimistic-locking repository for pydantic models."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from occ_core.primitives.exceptions import ValidationError
from occ_core.updater import insert_versioned, update_if_current
from occ_core.versioning import VERSION_FIELD

from .model_mapper import MongoDBModelMapper
from .models import VersionedModel
from .store import MongoDocumentStore

if TYPE_CHECKING:
    from occ_core.result import UpdateResult

    from .connection import MongoConnectionManager

T = TypeVar("T", bound=VersionedModel)

logger = logging.getLogger("occ.mongo.repository")


class MongoVersionedRepository(Generic[T]):
    """Repository whose writes are conditioned on the model's version.

    ``add`` stores the first revision at version 1. ``update`` and ``save``
    apply a change only if the stored version still equals the expected one
    and return the post-image with the version bumped by one.

    The version lives in the ``version`` field declared by
    :class:`VersionedModel`, which is also the stored field name.

    Raises ``VersionConflictError`` when the document moved on (or does not
    exist); driver errors propagate unchanged. No retries are attempted.

    Usage::

        repo = MongoVersionedRepository(connection, "orders", Order)
        order = await repo.add(Order(total=10))          # version 1
        order = await repo.update(order.id, {"total": 12}, order.version)
        order.total = 15
        order = await repo.save(order)                    # version 3
    """

    def __init__(
        self,
        connection: MongoConnectionManager,
        collection: str,
        model_cls: type[T],
        *,
        id_field: str = "id",
        database: str | None = None,
    ) -> None:
        self._connection = connection
        self._collection_name = collection
        self._database = database
        self._mapper = MongoDBModelMapper(model_cls, id_field=id_field)

    def _store(self) -> MongoDocumentStore:
        return self._connection.document_store(
            self._collection_name, database=self._database
        )

    async def add(self, entity: T, *, session: Any = None) -> T:
        """Insert the first revision of ``entity``; returns it at version 1."""
        doc = self._mapper.to_doc(entity)
        stored = await insert_versioned(
            self._store(), doc, session=session
        )
        return self._mapper.from_doc(stored)

    async def get(self, entity_id: str, *, session: Any = None) -> T | None:
        """Load one document by id."""
        doc = await self._store().find_one({"_id": entity_id}, session=session)
        if doc is None:
            return None
        return self._mapper.from_doc(doc)

    async def update(
        self,
        entity_id: str,
        changes: dict[str, Any],
        expected_version: int,
        *,
        session: Any = None,
        max_time_ms: int | None = None,
    ) -> T:
        """Set ``changes`` on the document if it is at ``expected_version``."""
        if self._mapper.id_field in changes or "_id" in changes:
            raise ValidationError({"changes": ["the document id cannot be changed"]})
        result = await update_if_current(
            self._store(),
            {"_id": entity_id},
            self._mapper.to_fields(changes),
            expected_version,
            session=session,
            max_time_ms=max_time_ms,
        )
        return self._unwrap(entity_id, result)

    async def save(
        self,
        entity: T,
        *,
        session: Any = None,
        max_time_ms: int | None = None,
    ) -> T:
        """Write every payload field of ``entity`` conditioned on ``entity.version``."""
        doc = self._mapper.to_doc(entity)
        entity_id = doc.pop("_id")
        expected_version = doc.pop(VERSION_FIELD)
        result = await update_if_current(
            self._store(),
            {"_id": entity_id},
            doc,
            expected_version,
            session=session,
            max_time_ms=max_time_ms,
        )
        return self._unwrap(entity_id, result)

    def _unwrap(self, entity_id: str, result: UpdateResult) -> T:
        if result.is_conflict:
            logger.info(
                "Version conflict on %s/%s at expected version %s",
                self._collection_name,
                entity_id,
                result.expected_version,
                extra={
                    "collection": self._collection_name,
                    "entity_id": entity_id,
                    "expected_version": result.expected_version,
                },
            )
        return self._mapper.from_doc(result.unwrap())
