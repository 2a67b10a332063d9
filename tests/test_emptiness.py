"""Tests for the emptiness oracle."""

import pytest

from qrmenu.core.exceptions import StoreUnavailableError
from qrmenu.services import EmptinessOracle
from qrmenu.services.fallback import FailClosedPolicy, FailOpenPolicy


@pytest.fixture
def oracle(store, paths):
    return EmptinessOracle(store, FailOpenPolicy(), paths=paths)


class TestEmptinessOracle:
    """Tests for EmptinessOracle signals."""

    @pytest.mark.asyncio
    async def test_empty_store(self, oracle):
        assert await oracle.is_empty() is True

    @pytest.mark.asyncio
    async def test_static_usage_marker_alone_is_empty(self, oracle, store, paths):
        await store.set(paths.tenant, {"usingStaticData": True, "lastStaticDataUsage": "t"})
        assert await oracle.is_empty() is True

    @pytest.mark.asyncio
    async def test_flag_false_is_not_empty(self, oracle, store, paths):
        await store.set(paths.tenant, {"usingStaticData": False})
        assert await oracle.is_empty() is False

    @pytest.mark.asyncio
    async def test_last_updated_is_not_empty(self, oracle, store, paths):
        await store.set(paths.tenant, {"lastUpdated": "2024-01-01T00:00:00+00:00"})
        assert await oracle.is_empty() is False

    @pytest.mark.asyncio
    async def test_custom_name_is_not_empty(self, oracle, store, paths):
        await store.set(paths.tenant, {"info": {"name": "Lezzet Durağı"}})
        assert await oracle.is_empty() is False

    @pytest.mark.asyncio
    async def test_demo_name_is_empty(self, oracle, store, paths):
        await store.set(paths.tenant, {"info": {"name": "QR Menü Demo Restoran"}})
        assert await oracle.is_empty() is True

    @pytest.mark.asyncio
    async def test_one_category_is_not_empty(self, oracle, store, paths):
        await store.set(paths.category("tatlilar"), {"name": "Tatlılar"})
        assert await oracle.is_empty() is False

    @pytest.mark.asyncio
    async def test_store_failure_fail_open(self, oracle, store, paths):
        await store.set(paths.tenant, {"usingStaticData": False})
        store.available = False

        assert await oracle.is_empty() is True

    @pytest.mark.asyncio
    async def test_store_failure_fail_closed(self, store, paths):
        oracle = EmptinessOracle(store, FailClosedPolicy(), paths=paths)
        store.available = False

        with pytest.raises(StoreUnavailableError):
            await oracle.is_empty()
