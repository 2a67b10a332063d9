"""
Fallback-Aware Menu Repository

CRUD for restaurant info, admin credential, categories and items.

Read operations:
    - consult the EmptinessOracle first and serve the matching slice of
      the demo dataset while the store is empty
    - hand store failures to the fallback policy (fail-open serves the
      demo slice, fail-closed raises StoreUnavailableError)

Write operations:
    - target only the live store; the demo dataset is never written
    - stamp usingStaticData=False / lastUpdated on the tenant document in
      the same atomic batch as the change
    - raise StoreWriteError on store failure, NotFoundError when the
      targeted category or item does not exist
    - invalidate the snapshot cache on success

Store calls carry an explicit timeout; a timeout is handled like any
other store failure.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from pydantic import ValidationError

from qrmenu.core.exceptions import (
    MenuError,
    NotFoundError,
    StoreUnavailableError,
    StoreWriteError,
)
from qrmenu.data import (
    LAST_STATIC_USAGE_FIELD,
    LAST_UPDATED_FIELD,
    USING_STATIC_DATA_FLAG,
    get_static_data,
)
from qrmenu.schemas import MenuCategory, MenuItem, RestaurantInfo
from qrmenu.services.cache import SnapshotCache
from qrmenu.services.emptiness import EmptinessOracle
from qrmenu.services.fallback import BaseFallbackPolicy
from qrmenu.services.identifiers import disambiguate, generate_identifier
from qrmenu.services.paths import TenantPaths
from qrmenu.services.store import BaseDocumentStore, WriteBatch, run_with_timeout

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fields that are never written through partial updates
_CATEGORY_IMMUTABLE_FIELDS = ("id", "items")
_ITEM_IMMUTABLE_FIELDS = ("id",)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MenuRepository:
    """
    Data access for the single restaurant tenant.

    Attributes:
        store: Backing document store
        oracle: Emptiness oracle consulted by every read
        cache: Snapshot cache invalidated by every write
        policy: Read failure policy
        paths: Document layout of the tenant

    Example:
        >>> repository = get_repository()
        >>> category_id = await repository.create_category("Tatlılar", "Ev yapımı")
        >>> await repository.create_item(category_id, {"name": "Baklava", "description": "...", "price": 120})
    """

    def __init__(
        self,
        store: BaseDocumentStore,
        oracle: EmptinessOracle,
        cache: SnapshotCache,
        policy: BaseFallbackPolicy,
        paths: Optional[TenantPaths] = None,
        timeout_seconds: Optional[float] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.oracle = oracle
        self.cache = cache
        self.policy = policy
        self.paths = paths or TenantPaths()
        self.timeout_seconds = timeout_seconds
        self._clock = clock

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _call(self, awaitable: Awaitable[T]) -> T:
        return await run_with_timeout(awaitable, self.timeout_seconds)

    async def _guard(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Run a store call on a write path; store failures become StoreWriteError."""
        try:
            return await self._call(awaitable)
        except StoreUnavailableError as e:
            logger.error(f"{operation} failed: {e}")
            raise StoreWriteError(operation, f"{operation} failed: {e}") from e

    def _timestamp(self) -> str:
        return self._clock().isoformat()

    def real_data_markers(self) -> dict[str, Any]:
        return {USING_STATIC_DATA_FLAG: False, LAST_UPDATED_FIELD: self._timestamp()}

    def _category_path(self, category_id: str) -> str:
        try:
            return self.paths.category(category_id)
        except ValueError:
            raise NotFoundError("category", category_id)

    def _item_path(self, category_id: str, item_id: str) -> str:
        self._category_path(category_id)
        try:
            return self.paths.item(category_id, item_id)
        except ValueError:
            raise NotFoundError("item", item_id)

    async def commit_batch(self, operation: str, batch: WriteBatch) -> None:
        """
        Commit a batch on a write path and invalidate the snapshot cache.

        Raises:
            StoreWriteError: The store rejected or could not apply the batch
            NotFoundError: An update in the batch targeted a missing document
        """
        await self._guard(operation, self.store.commit(batch))
        self.cache.invalidate()

    # =========================================================================
    # LIVE READS (no fallback, used by the aggregator)
    # =========================================================================

    async def is_empty(self) -> bool:
        return await self.oracle.is_empty()

    async def fetch_tenant(self) -> Optional[dict[str, Any]]:
        return await self._call(self.store.get(self.paths.tenant))

    async def fetch_info(self) -> Optional[RestaurantInfo]:
        """
        Live restaurant info.

        Returns:
            RestaurantInfo: Stored info, or the demo info if the tenant
                document exists without one
            None: The tenant document does not exist
        """
        tenant = await self.fetch_tenant()
        if tenant is None:
            return None
        info = tenant.get("info")
        if not info:
            return get_static_data().info
        return RestaurantInfo.model_validate(info)

    async def fetch_credential(self) -> Optional[str]:
        """
        Live admin secret.

        The demo secret stays valid until one is stored. Returns None only
        when the tenant document does not exist.
        """
        tenant = await self.fetch_tenant()
        if tenant is None:
            return None
        return tenant.get("adminPassword") or get_static_data().admin_password

    async def _fetch_items(self, category_id: str) -> list[MenuItem]:
        # No ordering guarantee for items; they come back in store order
        documents = await self._call(self.store.list_documents(self.paths.items(category_id)))
        return [MenuItem.model_validate({**doc.data, "id": doc.id}) for doc in documents]

    async def fetch_categories(self) -> list[MenuCategory]:
        """Live categories sorted by order (ties by id), each with its items."""
        documents = await self._call(
            self.store.list_documents(self.paths.categories, order_by="order")
        )
        items = await asyncio.gather(*(self._fetch_items(doc.id) for doc in documents))
        return [
            MenuCategory.model_validate({**doc.data, "id": doc.id, "items": category_items})
            for doc, category_items in zip(documents, items)
        ]

    async def mark_using_static_data(self) -> None:
        """Record that readers are being served the demo dataset. Never raises."""
        try:
            await self._call(self.store.set(
                self.paths.tenant,
                {USING_STATIC_DATA_FLAG: True, LAST_STATIC_USAGE_FIELD: self._timestamp()},
                merge=True,
            ))
        except MenuError as e:
            logger.warning(f"Could not mark static data usage: {e}")

    # =========================================================================
    # RESTAURANT INFO
    # =========================================================================

    async def get_info(self) -> RestaurantInfo:
        fallback = get_static_data().info
        try:
            if await self.oracle.is_empty():
                await self.mark_using_static_data()
                return fallback
            return await self.fetch_info() or fallback
        except (StoreUnavailableError, ValidationError) as e:
            return self.policy.on_read_error(e, fallback, "get_info")

    async def update_info(self, info: RestaurantInfo) -> None:
        """Replace the info object of the tenant document (top-level merge)."""
        await self._guard("update_info", self.store.set(
            self.paths.tenant,
            {"info": info.to_document(), **self.real_data_markers()},
            merge=True,
        ))
        self.cache.invalidate()
        logger.info(f"Restaurant info updated ({info.name})")

    # =========================================================================
    # ADMIN CREDENTIAL
    # =========================================================================

    async def get_credential(self) -> str:
        fallback = get_static_data().admin_password
        try:
            if await self.oracle.is_empty():
                return fallback
            return await self.fetch_credential() or fallback
        except StoreUnavailableError as e:
            return self.policy.on_read_error(e, fallback, "get_credential")

    async def has_stored_credential(self) -> bool:
        """
        Whether the live tenant document holds an admin secret.

        Unlike get_credential() this never falls back to the demo secret.

        Raises:
            StoreUnavailableError: The tenant document could not be read
        """
        tenant = await self.fetch_tenant()
        return bool(tenant and tenant.get("adminPassword"))

    async def update_credential(self, secret: str) -> None:
        await self._guard("update_credential", self.store.set(
            self.paths.tenant,
            {"adminPassword": secret, **self.real_data_markers()},
            merge=True,
        ))
        self.cache.invalidate()
        logger.info("Admin password updated")

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    async def list_categories(self) -> list[MenuCategory]:
        """Categories in display order; the demo categories while the store is empty."""
        fallback = get_static_data().categories
        try:
            if await self.oracle.is_empty():
                return fallback
            return await self.fetch_categories()
        except (StoreUnavailableError, ValidationError) as e:
            return self.policy.on_read_error(e, fallback, "list_categories")

    async def get_category(self, category_id: str) -> MenuCategory:
        """
        Raises:
            NotFoundError: No such category in the served menu
        """
        for category in await self.list_categories():
            if category.id == category_id:
                return category
        raise NotFoundError("category", category_id)

    async def create_category(self, name: str, description: Optional[str] = None) -> str:
        """
        Create a category at the end of the menu.

        The identifier is derived from the name; if it is already taken a
        numeric suffix is appended. Order is the highest live order + 1.

        Returns:
            str: The new category identifier
        """
        operation = "create_category"
        base_id = generate_identifier(name)
        if not base_id:
            raise StoreWriteError(operation, "Category name produces an empty identifier")

        existing = await self._guard(operation, self.store.list_documents(self.paths.categories))
        category_id = disambiguate(base_id, (doc.id for doc in existing))
        order = max((doc.data.get("order") or 0 for doc in existing), default=0) + 1

        batch = (
            self.store.batch()
            .set(self.paths.category(category_id), {
                "name": name,
                "description": description,
                "order": order,
            })
            .set(self.paths.tenant, self.real_data_markers(), merge=True)
        )
        await self.commit_batch(operation, batch)
        logger.info(f"Category '{category_id}' created (order={order})")
        return category_id

    async def update_category(self, category_id: str, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into the category. id and items are ignored."""
        data = {k: v for k, v in fields.items() if k not in _CATEGORY_IMMUTABLE_FIELDS}
        batch = (
            self.store.batch()
            .update(self._category_path(category_id), data)
            .set(self.paths.tenant, self.real_data_markers(), merge=True)
        )
        try:
            await self.commit_batch("update_category", batch)
        except NotFoundError as e:
            raise NotFoundError("category", category_id) from e
        logger.info(f"Category '{category_id}' updated ({', '.join(data) or 'no fields'})")

    async def delete_category(self, category_id: str) -> None:
        """Delete the category and every item under it in one atomic batch."""
        operation = "delete_category"
        path = self._category_path(category_id)
        if await self._guard(operation, self.store.get(path)) is None:
            raise NotFoundError("category", category_id)

        items = await self._guard(operation, self.store.list_documents(self.paths.items(category_id)))
        batch = self.store.batch()
        for item in items:
            batch.delete(item.path)
        batch.delete(path)
        batch.set(self.paths.tenant, self.real_data_markers(), merge=True)

        await self.commit_batch(operation, batch)
        logger.info(f"Category '{category_id}' deleted with {len(items)} items")

    # =========================================================================
    # ITEMS
    # =========================================================================

    async def get_item(self, category_id: str, item_id: str) -> MenuItem:
        category = await self.get_category(category_id)
        for item in category.items:
            if item.id == item_id:
                return item
        raise NotFoundError("item", item_id)

    async def create_item(self, category_id: str, item_data: Mapping[str, Any]) -> str:
        """
        Create an item in a category.

        ``item_data`` uses the stored (camelCase) field names and is assumed
        to be validated already. ``available`` defaults to True.

        Returns:
            str: The new item identifier, unique within the category
        """
        operation = "create_item"
        category_path = self._category_path(category_id)
        if await self._guard(operation, self.store.get(category_path)) is None:
            raise NotFoundError("category", category_id)

        base_id = generate_identifier(str(item_data.get("name") or ""))
        if not base_id:
            raise StoreWriteError(operation, "Item name produces an empty identifier")

        existing = await self._guard(operation, self.store.list_documents(self.paths.items(category_id)))
        item_id = disambiguate(base_id, (doc.id for doc in existing))

        data = {k: v for k, v in item_data.items() if k not in _ITEM_IMMUTABLE_FIELDS}
        if data.get("available") is None:
            data["available"] = True

        batch = (
            self.store.batch()
            .set(self.paths.item(category_id, item_id), data)
            .set(self.paths.tenant, self.real_data_markers(), merge=True)
        )
        await self.commit_batch(operation, batch)
        logger.info(f"Item '{item_id}' created in '{category_id}'")
        return item_id

    async def update_item(self, category_id: str, item_id: str, fields: Mapping[str, Any]) -> None:
        data = {k: v for k, v in fields.items() if k not in _ITEM_IMMUTABLE_FIELDS}
        batch = (
            self.store.batch()
            .update(self._item_path(category_id, item_id), data)
            .set(self.paths.tenant, self.real_data_markers(), merge=True)
        )
        try:
            await self.commit_batch("update_item", batch)
        except NotFoundError as e:
            raise NotFoundError("item", item_id) from e
        logger.info(f"Item '{category_id}/{item_id}' updated")

    async def delete_item(self, category_id: str, item_id: str) -> None:
        operation = "delete_item"
        path = self._item_path(category_id, item_id)
        if await self._guard(operation, self.store.get(path)) is None:
            raise NotFoundError("item", item_id)

        batch = (
            self.store.batch()
            .delete(path)
            .set(self.paths.tenant, self.real_data_markers(), merge=True)
        )
        await self.commit_batch(operation, batch)
        logger.info(f"Item '{category_id}/{item_id}' deleted")

    # =========================================================================
    # MAINTENANCE
    # =========================================================================

    async def clear_all(self) -> dict[str, int]:
        """
        Delete the tenant document, every category and every item atomically.
        Readers fall back to the demo dataset afterwards.

        Returns:
            dict: Number of deleted categories and items
        """
        operation = "clear_all"
        categories = await self._guard(operation, self.store.list_documents(self.paths.categories))
        batch = self.store.batch()
        item_count = 0
        for category in categories:
            items = await self._guard(operation, self.store.list_documents(self.paths.items(category.id)))
            for item in items:
                batch.delete(item.path)
            item_count += len(items)
            batch.delete(category.path)
        batch.delete(self.paths.tenant)

        await self.commit_batch(operation, batch)
        logger.info(f"Store cleared: {len(categories)} categories, {item_count} items")
        return {"categories": len(categories), "items": item_count}
