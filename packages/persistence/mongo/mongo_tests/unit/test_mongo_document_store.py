"""Unit tests for MongoDocumentStore and update_if_current over Motor."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ReturnDocument
from pymongo.errors import ExecutionTimeout

from occ_core import update_if_current
from occ_core.ports.document_store import IDocumentStore
from occ_persistence_mongo.store import MongoDocumentStore


@pytest.fixture
async def store(mongo_collection):
    await mongo_collection.insert_one({"_id": "doc-1", "name": "original", "version": 5})
    return MongoDocumentStore(mongo_collection)


class TestMongoDocumentStore:
    """Tests for the store adapter itself."""

    @pytest.mark.asyncio
    async def test_satisfies_port(self, store):
        assert isinstance(store, IDocumentStore)

    @pytest.mark.asyncio
    async def test_find_one_and_update_returns_post_image(self, store):
        doc = await store.find_one_and_update(
            {"_id": "doc-1", "version": 5},
            {"$set": {"name": "x"}, "$inc": {"version": 1}},
        )

        assert doc == {"_id": "doc-1", "name": "x", "version": 6}

    @pytest.mark.asyncio
    async def test_find_one_and_update_no_match_returns_none(self, store):
        doc = await store.find_one_and_update(
            {"_id": "doc-1", "version": 4}, {"$inc": {"version": 1}}
        )

        assert doc is None

    @pytest.mark.asyncio
    async def test_insert_and_find_one(self, store):
        inserted_id = await store.insert_one({"_id": "doc-2", "version": 1})

        assert inserted_id == "doc-2"
        assert await store.find_one({"_id": "doc-2"}) == {"_id": "doc-2", "version": 1}

    @pytest.mark.asyncio
    async def test_forwards_session_and_deadline(self):
        collection = MagicMock()
        collection.find_one_and_update = AsyncMock(return_value={"_id": "a", "version": 2})
        session = object()

        await MongoDocumentStore(collection).find_one_and_update(
            {"_id": "a", "version": 1},
            {"$inc": {"version": 1}},
            session=session,
            max_time_ms=500,
        )

        collection.find_one_and_update.assert_awaited_once_with(
            {"_id": "a", "version": 1},
            {"$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
            session=session,
            maxTimeMS=500,
        )

    @pytest.mark.asyncio
    async def test_omits_unset_options(self):
        collection = MagicMock()
        collection.find_one_and_update = AsyncMock(return_value=None)

        await MongoDocumentStore(collection).find_one_and_update({"_id": "a"}, {})

        collection.find_one_and_update.assert_awaited_once_with(
            {"_id": "a"}, {}, return_document=ReturnDocument.AFTER
        )


class TestUpdateIfCurrentOnMongo:
    """The conditional-update protocol end to end on a mocked collection."""

    @pytest.mark.asyncio
    async def test_success_path(self, store, mongo_collection):
        result = await update_if_current(store, {"_id": "doc-1"}, {"name": "x"}, 5)

        assert result.is_updated
        assert result.document["version"] == 6
        assert result.document["name"] == "x"
        assert await mongo_collection.find_one({"_id": "doc-1"}) == result.document

    @pytest.mark.asyncio
    async def test_stale_version_conflicts_without_mutation(self, store, mongo_collection):
        await update_if_current(store, {"_id": "doc-1"}, {"name": "x"}, 5)

        result = await update_if_current(store, {"_id": "doc-1"}, {"name": "stale"}, 5)

        assert result.is_conflict
        stored = await mongo_collection.find_one({"_id": "doc-1"})
        assert stored == {"_id": "doc-1", "name": "x", "version": 6}

    @pytest.mark.asyncio
    async def test_nonexistent_document_conflicts(self, store):
        result = await update_if_current(store, {"_id": "nope"}, {"name": "x"}, 1)

        assert result.is_conflict

    @pytest.mark.asyncio
    async def test_concurrent_callers_exactly_one_wins(self, store, mongo_collection):
        results = await asyncio.gather(
            *(
                update_if_current(store, {"_id": "doc-1"}, {"writer": n}, 5)
                for n in range(10)
            )
        )

        winners = [r for r in results if r.is_updated]
        assert len(winners) == 1
        assert winners[0].version == 6
        assert sum(r.is_conflict for r in results) == 9
        stored = await mongo_collection.find_one({"_id": "doc-1"})
        assert stored["version"] == 6

    @pytest.mark.asyncio
    async def test_deadline_exceeded_passes_through(self, mongo_collection):
        await mongo_collection.insert_one({"_id": "doc-1", "version": 5})
        error = ExecutionTimeout("operation exceeded time limit", code=50)
        failing = MagicMock()
        failing.find_one_and_update = AsyncMock(side_effect=error)

        result = await update_if_current(
            MongoDocumentStore(failing), {"_id": "doc-1"}, {"name": "x"}, 5, max_time_ms=1
        )

        assert result.is_store_failure
        assert result.error is error
        with pytest.raises(ExecutionTimeout):
            result.unwrap()
        assert await mongo_collection.find_one({"_id": "doc-1"}) == {
            "_id": "doc-1",
            "version": 5,
        }
