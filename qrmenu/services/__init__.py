"""
                        Services Module

Data-access layer of the menu platform. The factories below wire one
shared document store, snapshot cache and fallback policy into the
repository and aggregator used by the API routes.

Services:
    - store: Document store backends (memory / SQL)
    - identifiers: Identifiers derived from display names
    - emptiness: Live data vs. demo dataset decision
    - cache: Short-lived snapshot memo
    - repository: Fallback-aware CRUD
    - aggregator: Consistent full snapshot and bulk import
"""

import logging
from functools import lru_cache

from qrmenu.core.config import get_settings
from qrmenu.services.aggregator import MenuAggregator
from qrmenu.services.cache import SnapshotCache
from qrmenu.services.emptiness import EmptinessOracle
from qrmenu.services.fallback import BaseFallbackPolicy, get_fallback_policy
from qrmenu.services.paths import TenantPaths
from qrmenu.services.repository import MenuRepository
from qrmenu.services.store import get_document_store, reset_document_store

logger = logging.getLogger(__name__)


@lru_cache()
def get_snapshot_cache() -> SnapshotCache:
    """Process-wide snapshot cache shared by the repository and aggregator."""
    settings = get_settings()
    return SnapshotCache(
        ttl_seconds=settings.cache_ttl_seconds,
        single_flight=settings.cache_single_flight,
    )


@lru_cache()
def get_policy() -> BaseFallbackPolicy:
    """Configured read failure policy."""
    return get_fallback_policy(get_settings().fallback_mode)


@lru_cache()
def get_repository() -> MenuRepository:
    """
    Get the configured repository instance.

    Returns:
        MenuRepository: Repository over the configured document store
    """
    settings = get_settings()
    store = get_document_store()
    paths = TenantPaths(settings.tenant_id)
    policy = get_policy()
    oracle = EmptinessOracle(
        store,
        policy,
        paths=paths,
        timeout_seconds=settings.store_timeout_seconds,
    )
    logger.info(
        f"Menu Repository: store={store.provider_name}, "
        f"fallback={policy.mode.value}, tenant={settings.tenant_id}"
    )
    return MenuRepository(
        store,
        oracle,
        get_snapshot_cache(),
        policy,
        paths=paths,
        timeout_seconds=settings.store_timeout_seconds,
    )


@lru_cache()
def get_aggregator() -> MenuAggregator:
    """Get the aggregator sharing the repository's cache and policy."""
    return MenuAggregator(get_repository(), get_snapshot_cache(), get_policy())


def reset_services() -> None:
    """
    Clear every cached service instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_aggregator.cache_clear()
    get_repository.cache_clear()
    get_policy.cache_clear()
    get_snapshot_cache.cache_clear()
    reset_document_store()
    logger.debug("Service caches cleared")


__all__ = [
    "get_aggregator",
    "get_repository",
    "get_snapshot_cache",
    "get_policy",
    "reset_services",
    "MenuAggregator",
    "MenuRepository",
    "EmptinessOracle",
    "SnapshotCache",
    "TenantPaths",
]
