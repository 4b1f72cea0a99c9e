"""MongoDocumentStore — IDocumentStore over a Motor collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo import ReturnDocument

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection

logger = logging.getLogger("occ.mongo.store")


class MongoDocumentStore:
    """Document store backed by one MongoDB collection.

    ``find_one_and_update`` maps onto MongoDB's findAndModify, which matches
    and mutates a single document atomically; concurrent conditional
    updates on the same document are serialized by the server.

    ``session`` is passed through only when given (mongomock rejects any
    session argument); ``max_time_ms`` becomes the ``maxTimeMS`` deadline.
    Driver errors (``pymongo.errors.*``) propagate unchanged.
    """

    def __init__(self, collection: AsyncIOMotorCollection[Any]) -> None:
        self._collection = collection

    @property
    def collection(self) -> AsyncIOMotorCollection[Any]:
        return self._collection

    @staticmethod
    def _options(
        session: Any = None, max_time_ms: int | None = None
    ) -> dict[str, Any]:
        options: dict[str, Any] = {}
        if session is not None:
            options["session"] = session
        if max_time_ms is not None:
            options["maxTimeMS"] = max_time_ms
        return options

    async def find_one_and_update(
        self,
        filter: dict[str, Any],  # noqa: A002
        update: dict[str, Any],
        *,
        session: Any = None,
        max_time_ms: int | None = None,
    ) -> dict[str, Any] | None:
        doc = await self._collection.find_one_and_update(
            filter,
            update,
            return_document=ReturnDocument.AFTER,
            **self._options(session, max_time_ms),
        )
        if doc is None:
            logger.debug(
                "find_one_and_update matched no document",
                extra={
                    "collection": getattr(self._collection, "name", None),
                    "filter": filter,
                },
            )
        return doc

    async def insert_one(
        self,
        document: dict[str, Any],
        *,
        session: Any = None,
    ) -> Any:
        result = await self._collection.insert_one(
            document, **self._options(session)
        )
        return result.inserted_id

    async def find_one(
        self,
        filter: dict[str, Any],  # noqa: A002
        *,
        session: Any = None,
    ) -> dict[str, Any] | None:
        return await self._collection.find_one(filter, **self._options(session))
