"""
In-Memory Document Store Implementation

Keeps documents in a process-local dict. Used in development mode
(ENV_MODE=development) and by the test suite to:
    - Run the service without a database
    - Simulate store outages (``available = False``)
    - Simulate latency and random failures, like the other mock services

Batches are committed copy-on-write: every operation is applied to a
staged copy, which replaces the live state only if all of them succeed.
"""

import asyncio
import copy
import logging
import random
from typing import Any, Optional

from qrmenu.core.exceptions import NotFoundError, StoreUnavailableError
from qrmenu.services.store.base import (
    BaseDocumentStore,
    BatchOperationType,
    Document,
    WriteBatch,
    document_id,
    parent_path,
)

logger = logging.getLogger(__name__)


class MemoryDocumentStore(BaseDocumentStore):
    """
    Mock implementation of the document store.

    Attributes:
        available: When False every call raises StoreUnavailableError
        failure_rate: Probability of a simulated backend failure (0.0-1.0)
        min_latency: Minimum simulated response time in seconds
        max_latency: Maximum simulated response time in seconds

    Example:
        >>> store = MemoryDocumentStore()
        >>> await store.set("restaurants/r", {"info": {"name": "Cafe"}})
        >>> await store.get("restaurants/r")
        {'info': {'name': 'Cafe'}}
    """

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
        available: bool = True,
    ):
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.available = available
        self._documents: dict[str, dict[str, Any]] = {}

        logger.info(
            f"MemoryDocumentStore initialized "
            f"(failure_rate={failure_rate:.0%}, "
            f"latency={min_latency}-{max_latency}s)"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "memory"

    async def _simulate_backend(self) -> None:
        """Simulate latency and failures before touching the data."""
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(self.min_latency, self.max_latency))
        if not self.available:
            raise StoreUnavailableError("Memory store is unavailable")
        if self.failure_rate and random.random() < self.failure_rate:
            raise StoreUnavailableError("Simulated document store failure")

    @staticmethod
    def _apply_set(
        documents: dict[str, dict[str, Any]],
        path: str,
        data: dict[str, Any],
        merge: bool,
    ) -> None:
        if merge and path in documents:
            merged = dict(documents[path])
            merged.update(copy.deepcopy(data))
            documents[path] = merged
        else:
            documents[path] = copy.deepcopy(data)

    async def get(self, path: str) -> Optional[dict[str, Any]]:
        await self._simulate_backend()
        data = self._documents.get(path)
        return copy.deepcopy(data) if data is not None else None

    async def set(self, path: str, data: dict[str, Any], merge: bool = False) -> None:
        await self._simulate_backend()
        self._apply_set(self._documents, path, data, merge)

    async def update(self, path: str, data: dict[str, Any]) -> None:
        await self._simulate_backend()
        if path not in self._documents:
            raise NotFoundError("document", path)
        self._apply_set(self._documents, path, data, merge=True)

    async def delete(self, path: str) -> bool:
        await self._simulate_backend()
        return self._documents.pop(path, None) is not None

    async def list_documents(
        self,
        collection: str,
        order_by: Optional[str] = None,
    ) -> list[Document]:
        await self._simulate_backend()
        documents = [
            Document(id=document_id(path), path=path, data=copy.deepcopy(data))
            for path, data in self._documents.items()
            if parent_path(path) == collection
        ]
        if order_by:
            documents.sort(key=lambda d: (d.data.get(order_by) is None, d.data.get(order_by) or 0, d.id))
        return documents

    async def count(self, collection: str) -> int:
        await self._simulate_backend()
        return sum(1 for path in self._documents if parent_path(path) == collection)

    async def commit(self, batch: WriteBatch) -> None:
        await self._simulate_backend()
        staged = dict(self._documents)
        for operation in batch.operations:
            if operation.op == BatchOperationType.DELETE:
                staged.pop(operation.path, None)
            elif operation.op == BatchOperationType.UPDATE:
                if operation.path not in staged:
                    raise NotFoundError("document", operation.path)
                self._apply_set(staged, operation.path, operation.data or {}, merge=True)
            else:
                self._apply_set(staged, operation.path, operation.data or {}, operation.merge)
        self._documents = staged
        logger.debug(f"Committed batch of {len(batch)} operations")

    async def health_check(self) -> bool:
        return self.available

    def clear(self) -> None:
        """Drop every document (test helper)."""
        self._documents.clear()
