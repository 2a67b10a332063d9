"""
Short-lived memo for the full restaurant snapshot.

A page load fires several reads within a second; the cache collapses
them into one fan-out over info, categories, items and credential.
Writes call invalidate() so a read right after a write is never stale.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SnapshotCache(Generic[T]):
    """
    Single-key TTL cache with an injectable clock.

    Attributes:
        ttl_seconds: Memo lifetime
        single_flight: Serialize misses so concurrent readers share one load

    Example:
        >>> cache = SnapshotCache(ttl_seconds=1.0)
        >>> data = await cache.get(aggregator.load)
        >>> cache.invalidate()
    """

    def __init__(
        self,
        ttl_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        single_flight: bool = False,
    ):
        self.ttl_seconds = ttl_seconds
        self.single_flight = single_flight
        self._clock = clock
        self._value: Optional[T] = None
        self._stored_at: Optional[float] = None
        self._generation = 0
        self._lock: Optional[asyncio.Lock] = None

    def peek(self) -> Optional[T]:
        """Return the memo if it is still fresh, without loading."""
        if self._stored_at is None:
            return None
        if self._clock() - self._stored_at < self.ttl_seconds:
            return self._value
        return None

    def invalidate(self) -> None:
        """Drop the memo. Loads already in flight will not store their result."""
        self._value = None
        self._stored_at = None
        self._generation += 1
        logger.debug("Snapshot cache invalidated")

    async def get(self, loader: Callable[[], Awaitable[T]]) -> T:
        """
        Return the fresh memo, or await ``loader`` and memoize its result.

        Args:
            loader: Coroutine function performing the full read
        """
        cached = self.peek()
        if cached is not None:
            return cached

        if not self.single_flight:
            return await self._load(loader)

        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            cached = self.peek()
            if cached is not None:
                return cached
            return await self._load(loader)

    async def _load(self, loader: Callable[[], Awaitable[T]]) -> T:
        generation = self._generation
        value = await loader()
        if generation == self._generation:
            self._value = value
            self._stored_at = self._clock()
        else:
            logger.debug("Discarding snapshot loaded before an invalidation")
        return value
