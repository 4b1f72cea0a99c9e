"""Tests for InMemoryDocumentStore."""

from __future__ import annotations

import pytest

from occ_core.adapters.memory import InMemoryDocumentStore
from occ_core.ports.document_store import IDocumentStore
from occ_core.primitives.exceptions import DuplicateDocumentError


@pytest.mark.asyncio
class TestInMemoryDocumentStore:
    @pytest.fixture
    def store(self) -> InMemoryDocumentStore:
        return InMemoryDocumentStore(
            [
                {"_id": "a", "name": "alpha", "count": 1, "version": 1},
                {"_id": "b", "name": "beta", "version": 1},
            ]
        )

    async def test_satisfies_port(self, store: InMemoryDocumentStore) -> None:
        assert isinstance(store, IDocumentStore)
        assert len(store) == 2

    async def test_find_one_by_id_and_field(self, store: InMemoryDocumentStore) -> None:
        assert (await store.find_one({"_id": "a"}))["name"] == "alpha"
        assert (await store.find_one({"name": "beta"}))["_id"] == "b"
        assert await store.find_one({"_id": "a", "name": "beta"}) is None

    async def test_find_one_and_update_applies_operators(
        self, store: InMemoryDocumentStore
    ) -> None:
        doc = await store.find_one_and_update(
            {"_id": "a"},
            {"$set": {"name": "A"}, "$inc": {"count": 2}, "$unset": {"version": ""}},
        )

        assert doc == {"_id": "a", "name": "A", "count": 3}

    async def test_inc_creates_missing_field(self, store: InMemoryDocumentStore) -> None:
        doc = await store.find_one_and_update({"_id": "b"}, {"$inc": {"count": 1}})

        assert doc["count"] == 1

    async def test_no_match_returns_none(self, store: InMemoryDocumentStore) -> None:
        assert await store.find_one_and_update({"_id": "zzz"}, {"$set": {"x": 1}}) is None

    async def test_unsupported_operator_raises(self, store: InMemoryDocumentStore) -> None:
        with pytest.raises(ValueError, match=r"\$push"):
            await store.find_one_and_update({"_id": "a"}, {"$push": {"tags": 1}})

    async def test_inc_on_non_numeric_field_changes_nothing(
        self, store: InMemoryDocumentStore
    ) -> None:
        with pytest.raises(ValueError, match="non-numeric"):
            await store.find_one_and_update(
                {"_id": "a"}, {"$set": {"count": 9}, "$inc": {"name": 1}}
            )

        assert store.snapshot("a") == {
            "_id": "a",
            "name": "alpha",
            "count": 1,
            "version": 1,
        }

    async def test_returned_documents_are_copies(self, store: InMemoryDocumentStore) -> None:
        doc = await store.find_one({"_id": "a"})
        doc["name"] = "mutated"

        assert store.snapshot("a")["name"] == "alpha"

    async def test_insert_generates_id(self, store: InMemoryDocumentStore) -> None:
        doc_id = await store.insert_one({"name": "gamma"})

        assert store.snapshot(doc_id)["name"] == "gamma"

    async def test_insert_duplicate_id_raises(self, store: InMemoryDocumentStore) -> None:
        with pytest.raises(DuplicateDocumentError):
            await store.insert_one({"_id": "a"})
