"""
Restaurant Snapshot Aggregator

Composes info + categories (with items) + admin secret into one
consistent RestaurantData, memoized by the SnapshotCache.

A snapshot is either entirely live or entirely the demo dataset: if the
store is classified "not empty" but the tenant document is missing, the
whole demo dataset is served instead of a live/static mix.
"""

import asyncio
import logging

from pydantic import ValidationError

from qrmenu.core.exceptions import StoreUnavailableError, StoreWriteError
from qrmenu.data import get_static_data
from qrmenu.schemas import PublicRestaurantData, RestaurantData
from qrmenu.services.cache import SnapshotCache
from qrmenu.services.fallback import BaseFallbackPolicy
from qrmenu.services.repository import MenuRepository

logger = logging.getLogger(__name__)


class MenuAggregator:
    """
    Read side of the menu: full and public snapshots, plus bulk import.

    Example:
        >>> aggregator = get_aggregator()
        >>> snapshot = await aggregator.get_full_snapshot()
        >>> print(snapshot.categories[0].id)
        'demo-sicak-icecekler'  # on an empty store
    """

    def __init__(
        self,
        repository: MenuRepository,
        cache: SnapshotCache,
        policy: BaseFallbackPolicy,
    ):
        self.repository = repository
        self.cache = cache
        self.policy = policy

    async def get_full_snapshot(self) -> RestaurantData:
        """Full aggregate including the admin secret, served through the cache."""
        return await self.cache.get(self._load_snapshot)

    async def get_public_snapshot(self) -> PublicRestaurantData:
        """Aggregate for anonymous visitors (admin secret stripped)."""
        snapshot = await self.get_full_snapshot()
        return snapshot.to_public()

    async def is_using_static_data(self) -> bool:
        """True while readers are served the demo dataset."""
        return await self.repository.is_empty()

    async def _load_snapshot(self) -> RestaurantData:
        try:
            if await self.repository.is_empty():
                await self.repository.mark_using_static_data()
                return get_static_data()

            info, categories, credential = await asyncio.gather(
                self.repository.fetch_info(),
                self.repository.fetch_categories(),
                self.repository.fetch_credential(),
            )
        except (StoreUnavailableError, ValidationError) as e:
            return self.policy.on_read_error(e, get_static_data(), "get_full_snapshot")

        if info is None or credential is None:
            logger.warning(
                "Inconsistent snapshot: store has data but no tenant document, "
                "serving static data"
            )
            return get_static_data()

        return RestaurantData(info=info, categories=categories, admin_password=credential)

    async def migrate_from_json(self, data: RestaurantData) -> None:
        """
        Seed the store with a complete RestaurantData in one atomic batch.

        Overwrites the tenant document and every category/item with the
        same ids. Documents not present in ``data`` are left untouched.

        Raises:
            StoreWriteError: A category or item id is not a valid path segment,
                or the batch could not be committed
        """
        paths = self.repository.paths
        batch = self.repository.store.batch()
        batch.set(paths.tenant, {
            "info": data.info.to_document(),
            "adminPassword": data.admin_password,
            **self.repository.real_data_markers(),
        })

        item_count = 0
        try:
            for category in data.categories:
                batch.set(
                    paths.category(category.id),
                    category.model_dump(by_alias=True, exclude_none=True, exclude={"id", "items"}),
                )
                for item in category.items:
                    batch.set(
                        paths.item(category.id, item.id),
                        item.model_dump(by_alias=True, exclude_none=True, exclude={"id"}),
                    )
                    item_count += 1
        except ValueError as e:
            raise StoreWriteError("migrate_from_json", f"migrate_from_json failed: {e}") from e

        await self.repository.commit_batch("migrate_from_json", batch)
        logger.info(
            f"Migrated {len(data.categories)} categories and {item_count} items"
        )
