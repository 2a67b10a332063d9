"""
Emptiness Oracle

Decides whether the store holds real tenant data or is "not yet
configured", in which case readers serve the demo dataset.
"""

import logging
from typing import Optional

from qrmenu.data import (
    LAST_UPDATED_FIELD,
    MIN_CATEGORIES_THRESHOLD,
    USING_STATIC_DATA_FLAG,
    static_restaurant_name,
)
from qrmenu.services.fallback import BaseFallbackPolicy
from qrmenu.services.paths import TenantPaths
from qrmenu.services.store import BaseDocumentStore, run_with_timeout

logger = logging.getLogger(__name__)


class EmptinessOracle:
    """
    Infers emptiness from the tenant document and the category count.

    Signals, first one found wins ("not empty"):
        1. usingStaticData is explicitly False
        2. lastUpdated is set
        3. info.name is set and differs from the demo restaurant's name
        4. at least MIN_CATEGORIES_THRESHOLD categories exist

    Store failures are delegated to the fallback policy (fail-open answers
    "empty", fail-closed raises StoreUnavailableError).
    """

    def __init__(
        self,
        store: BaseDocumentStore,
        policy: BaseFallbackPolicy,
        paths: Optional[TenantPaths] = None,
        timeout_seconds: Optional[float] = None,
        min_categories: int = MIN_CATEGORIES_THRESHOLD,
    ):
        self.store = store
        self.policy = policy
        self.paths = paths or TenantPaths()
        self.timeout_seconds = timeout_seconds
        self.min_categories = min_categories

    async def is_empty(self) -> bool:
        try:
            return await self._check()
        except Exception as e:
            return self.policy.on_emptiness_error(e)

    async def _check(self) -> bool:
        tenant = await run_with_timeout(self.store.get(self.paths.tenant), self.timeout_seconds)

        if tenant is not None:
            if tenant.get(USING_STATIC_DATA_FLAG) is False:
                return False
            if tenant.get(LAST_UPDATED_FIELD):
                return False
            info = tenant.get("info") or {}
            name = info.get("name")
            if name and name != static_restaurant_name():
                return False

        count = await run_with_timeout(self.store.count(self.paths.categories), self.timeout_seconds)
        empty = count < self.min_categories
        if empty:
            logger.debug("Store has no tenant data, demo dataset applies")
        return empty
