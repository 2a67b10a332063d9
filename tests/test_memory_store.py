"""Tests for the in-memory document store and path helpers."""

import pytest

from qrmenu.core.exceptions import NotFoundError, StoreUnavailableError
from qrmenu.services.store import (
    MemoryDocumentStore,
    document_id,
    join_path,
    parent_path,
    run_with_timeout,
)

TENANT = "restaurants/r"
CATEGORIES = "restaurants/r/categories"


class TestPathHelpers:
    def test_join_path(self):
        assert join_path("restaurants", "r", "categories") == CATEGORIES

    @pytest.mark.parametrize("segment", ["", "a/b"])
    def test_join_path_rejects_invalid_segments(self, segment):
        with pytest.raises(ValueError):
            join_path("restaurants", segment)

    def test_parent_and_id(self):
        path = "restaurants/r/categories/tatlilar"
        assert parent_path(path) == CATEGORIES
        assert document_id(path) == "tatlilar"


class TestMemoryDocumentStore:
    """Tests for MemoryDocumentStore."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, store):
        await store.set(TENANT, {"info": {"name": "Cafe"}})

        assert await store.get(TENANT) == {"info": {"name": "Cafe"}}
        assert await store.get("restaurants/missing") is None

    @pytest.mark.asyncio
    async def test_set_merge_is_top_level(self, store):
        await store.set(TENANT, {"info": {"name": "Cafe"}, "adminPassword": "x"})
        await store.set(TENANT, {"info": {"logo": "l.png"}}, merge=True)

        assert await store.get(TENANT) == {"info": {"logo": "l.png"}, "adminPassword": "x"}

    @pytest.mark.asyncio
    async def test_returned_data_is_a_copy(self, store):
        await store.set(TENANT, {"info": {"name": "Cafe"}})

        data = await store.get(TENANT)
        data["info"]["name"] = "Changed"

        assert (await store.get(TENANT))["info"]["name"] == "Cafe"

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, store):
        with pytest.raises(NotFoundError):
            await store.update(TENANT, {"a": 1})

    @pytest.mark.asyncio
    async def test_delete_reports_existence(self, store):
        await store.set(TENANT, {})

        assert await store.delete(TENANT) is True
        assert await store.delete(TENANT) is False

    @pytest.mark.asyncio
    async def test_list_documents_order(self, store):
        await store.set(f"{CATEGORIES}/b", {"order": 1})
        await store.set(f"{CATEGORIES}/a", {"order": 1})
        await store.set(f"{CATEGORIES}/c", {})
        await store.set(f"{CATEGORIES}/d", {"order": 0})

        docs = await store.list_documents(CATEGORIES, order_by="order")

        assert [d.id for d in docs] == ["d", "a", "b", "c"]

    @pytest.mark.asyncio
    async def test_count_only_direct_children(self, store):
        await store.set(f"{CATEGORIES}/a", {})
        await store.set(f"{CATEGORIES}/a/items/x", {})

        assert await store.count(CATEGORIES) == 1
        assert await store.count(f"{CATEGORIES}/a/items") == 1

    @pytest.mark.asyncio
    async def test_batch_applies_all_operations(self, store):
        await store.set(f"{CATEGORIES}/a", {"name": "A"})
        await store.set(f"{CATEGORIES}/a/items/x", {"name": "X"})

        batch = (
            store.batch()
            .delete(f"{CATEGORIES}/a/items/x")
            .update(f"{CATEGORIES}/a", {"name": "A2"})
            .set(TENANT, {"lastUpdated": "now"}, merge=True)
        )
        await store.commit(batch)

        assert await store.get(f"{CATEGORIES}/a/items/x") is None
        assert await store.get(f"{CATEGORIES}/a") == {"name": "A2"}
        assert await store.get(TENANT) == {"lastUpdated": "now"}

    @pytest.mark.asyncio
    async def test_failed_batch_leaves_state_intact(self, store):
        await store.set(f"{CATEGORIES}/a", {"name": "A"})

        batch = (
            store.batch()
            .delete(f"{CATEGORIES}/a")
            .set(TENANT, {"lastUpdated": "now"})
            .update(f"{CATEGORIES}/missing", {"name": "M"})
        )
        with pytest.raises(NotFoundError):
            await store.commit(batch)

        assert await store.get(f"{CATEGORIES}/a") == {"name": "A"}
        assert await store.get(TENANT) is None

    @pytest.mark.asyncio
    async def test_unavailable_store(self, store):
        await store.set(TENANT, {"a": 1})
        store.available = False

        with pytest.raises(StoreUnavailableError):
            await store.get(TENANT)
        with pytest.raises(StoreUnavailableError):
            await store.commit(store.batch().delete(TENANT))
        assert await store.health_check() is False

        store.available = True
        assert await store.get(TENANT) == {"a": 1}

    @pytest.mark.asyncio
    async def test_timeout_becomes_unavailable(self):
        slow = MemoryDocumentStore(min_latency=0.2, max_latency=0.2)

        with pytest.raises(StoreUnavailableError, match="timed out"):
            await run_with_timeout(slow.get(TENANT), 0.01)
