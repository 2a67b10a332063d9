"""Tests for the snapshot aggregator."""

import pytest
from pydantic import ValidationError

from qrmenu.core.exceptions import StoreUnavailableError, StoreWriteError
from qrmenu.data import get_static_data
from qrmenu.schemas import MenuCategory, MenuItem, RestaurantData, RestaurantInfo


def custom_dataset() -> RestaurantData:
    return RestaurantData.model_validate({
        "info": {"name": "Lezzet Durağı", "wifi": {"name": "Lezzet", "password": "misafir"}},
        "adminPassword": "s3cret",
        "categories": [
            {
                "id": "tatlilar",
                "name": "Tatlılar",
                "order": 2,
                "items": [
                    {"id": "baklava", "name": "Baklava", "description": "Fıstıklı", "price": 120},
                ],
            },
            {"id": "corbalar", "name": "Çorbalar", "order": 1, "items": []},
        ],
    })


class TestFullSnapshot:
    """Tests for get_full_snapshot()."""

    @pytest.mark.asyncio
    async def test_empty_store_returns_static_dataset(self, aggregator):
        snapshot = await aggregator.get_full_snapshot()

        assert len(snapshot.categories) == 3
        assert snapshot.categories[0].id == "demo-sicak-icecekler"
        assert snapshot.admin_password == "admin123"
        assert await aggregator.is_using_static_data() is True

    @pytest.mark.asyncio
    async def test_same_object_within_ttl(self, aggregator, clock):
        first = await aggregator.get_full_snapshot()
        clock.advance(0.5)
        second = await aggregator.get_full_snapshot()

        assert first is second

    @pytest.mark.asyncio
    async def test_refetch_after_ttl(self, aggregator, clock):
        first = await aggregator.get_full_snapshot()
        clock.advance(1.1)
        second = await aggregator.get_full_snapshot()

        assert first is not second
        assert first == second

    @pytest.mark.asyncio
    async def test_update_info_visible_immediately(self, aggregator, repository):
        await aggregator.get_full_snapshot()

        await repository.update_info(RestaurantInfo(name="Lezzet Durağı"))
        snapshot = await aggregator.get_full_snapshot()

        assert snapshot.info.name == "Lezzet Durağı"
        assert snapshot.categories == []
        assert snapshot.admin_password == "admin123"

    @pytest.mark.asyncio
    async def test_missing_tenant_document_serves_static_dataset(self, aggregator, store, paths):
        await store.set(paths.category("tatlilar"), {"name": "Tatlılar", "order": 1})

        snapshot = await aggregator.get_full_snapshot()

        assert snapshot == get_static_data()

    @pytest.mark.asyncio
    async def test_fail_open_on_outage(self, aggregator, repository, store):
        await repository.update_info(RestaurantInfo(name="Lezzet Durağı"))
        store.available = False

        snapshot = await aggregator.get_full_snapshot()

        assert snapshot.info.name == "QR Menü Demo Restoran"

    @pytest.mark.asyncio
    async def test_fail_closed_on_outage(self, closed_services, store):
        _, aggregator = closed_services
        store.available = False

        with pytest.raises(StoreUnavailableError):
            await aggregator.get_full_snapshot()


class TestPublicSnapshot:
    @pytest.mark.asyncio
    async def test_admin_password_stripped(self, aggregator):
        public = await aggregator.get_public_snapshot()

        dumped = public.model_dump(by_alias=True)
        assert "adminPassword" not in dumped
        assert dumped["categories"][0]["id"] == "demo-sicak-icecekler"

    @pytest.mark.asyncio
    async def test_public_copy_does_not_touch_cache(self, aggregator):
        public = await aggregator.get_public_snapshot()
        public.categories.clear()

        snapshot = await aggregator.get_full_snapshot()
        assert len(snapshot.categories) == 3


class TestMigrate:
    """Tests for migrate_from_json()."""

    @pytest.mark.asyncio
    async def test_migrate_then_read(self, aggregator, repository):
        await aggregator.migrate_from_json(custom_dataset())

        snapshot = await aggregator.get_full_snapshot()

        assert snapshot.info.name == "Lezzet Durağı"
        assert snapshot.admin_password == "s3cret"
        assert [c.id for c in snapshot.categories] == ["corbalar", "tatlilar"]
        assert snapshot.categories[1].items[0].id == "baklava"
        assert await repository.is_empty() is False

    @pytest.mark.asyncio
    async def test_migrate_invalidates_cache(self, aggregator):
        before = await aggregator.get_full_snapshot()
        await aggregator.migrate_from_json(custom_dataset())

        after = await aggregator.get_full_snapshot()

        assert before.info.name != after.info.name

    @pytest.mark.asyncio
    async def test_migrate_store_down(self, aggregator, store):
        store.available = False

        with pytest.raises(StoreWriteError) as exc_info:
            await aggregator.migrate_from_json(custom_dataset())
        assert exc_info.value.operation == "migrate_from_json"

    @pytest.mark.asyncio
    async def test_migrate_invalid_id_is_a_write_error(self, aggregator, store, paths):
        data = custom_dataset()
        data.categories.append(MenuCategory.model_construct(id="a/b", name="Kırık", order=3, items=[]))

        with pytest.raises(StoreWriteError) as exc_info:
            await aggregator.migrate_from_json(data)

        assert exc_info.value.operation == "migrate_from_json"
        assert await store.get(paths.tenant) is None


class TestSchemaIds:
    def test_ids_must_be_single_path_segments(self):
        for bad_id in ("", "a/b"):
            with pytest.raises(ValidationError):
                MenuCategory(id=bad_id, name="Tatlılar")
            with pytest.raises(ValidationError):
                MenuItem(id=bad_id, name="Baklava", price=1)
