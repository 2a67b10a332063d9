"""
Document Store Abstract Base Class

Defines the interface contract for all document store implementations.
Both MemoryDocumentStore and SqlDocumentStore implement these methods,
so the repository behaves identically regardless of which store is active.

Documents are addressed by slash-separated paths that alternate
collection and document ids:

    restaurants/main-restaurant
    restaurants/main-restaurant/categories/tatlilar
    restaurants/main-restaurant/categories/tatlilar/items/baklava

Design Pattern: Strategy Pattern
    - Development uses an in-memory store, production a SQL-backed one
    - Multi-document consistency is provided only by commit(batch)
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Optional, TypeVar

from qrmenu.core.exceptions import StoreUnavailableError

T = TypeVar("T")


# =============================================================================
# PATH HELPERS
# =============================================================================

def join_path(*segments: str) -> str:
    """
    Join path segments, rejecting empty segments and embedded slashes.

    Raises:
        ValueError: If a segment is empty or contains "/"
    """
    for segment in segments:
        if not segment or "/" in segment:
            raise ValueError(f"Invalid path segment: {segment!r}")
    return "/".join(segments)


def parent_path(path: str) -> str:
    """Collection path containing the document at ``path``."""
    return path.rsplit("/", 1)[0] if "/" in path else ""


def document_id(path: str) -> str:
    """Last segment of a document path."""
    return path.rsplit("/", 1)[-1]


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class Document:
    """
    A stored document.

    Attributes:
        id: Last path segment
        path: Full document path
        data: Document fields (a private copy)
    """
    id: str
    path: str
    data: dict[str, Any]


class BatchOperationType(str, Enum):
    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class BatchOperation:
    """Single mutation recorded in a WriteBatch."""
    op: BatchOperationType
    path: str
    data: Optional[dict[str, Any]] = None
    merge: bool = False


@dataclass
class WriteBatch:
    """
    Ordered set of mutations applied together or not at all.

    Example:
        >>> batch = store.batch()
        >>> batch.delete("restaurants/r/categories/c/items/i")
        >>> batch.delete("restaurants/r/categories/c")
        >>> await store.commit(batch)
    """
    operations: list[BatchOperation] = field(default_factory=list)

    def set(self, path: str, data: dict[str, Any], merge: bool = False) -> "WriteBatch":
        """Create or overwrite a document (top-level merge when merge=True)."""
        self.operations.append(BatchOperation(BatchOperationType.SET, path, dict(data), merge))
        return self

    def update(self, path: str, data: dict[str, Any]) -> "WriteBatch":
        """Merge fields into an existing document; the commit fails if it is missing."""
        self.operations.append(BatchOperation(BatchOperationType.UPDATE, path, dict(data)))
        return self

    def delete(self, path: str) -> "WriteBatch":
        """Delete a document. Deleting a missing document is not an error."""
        self.operations.append(BatchOperation(BatchOperationType.DELETE, path))
        return self

    def __len__(self) -> int:
        return len(self.operations)


async def run_with_timeout(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    """
    Await a store call with an explicit timeout.

    Raises:
        StoreUnavailableError: If the call does not finish within ``timeout`` seconds
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise StoreUnavailableError(f"Document store call timed out after {timeout}s") from e


# =============================================================================
# INTERFACE
# =============================================================================

class BaseDocumentStore(ABC):
    """
    Abstract base class for document stores.

    All implementations must:
        1. Raise StoreUnavailableError when the backend cannot be reached
        2. Raise NotFoundError from update() / commit() when an UPDATE
           targets a missing document
        3. Apply commit(batch) atomically
        4. Never hand out references to their internal state
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the storage backend.

        Returns:
            str: Provider name (e.g., "memory", "sql")
        """
        pass

    @abstractmethod
    async def get(self, path: str) -> Optional[dict[str, Any]]:
        """
        Read a document.

        Returns:
            dict: Document fields, or None if the document does not exist
        """
        pass

    @abstractmethod
    async def set(self, path: str, data: dict[str, Any], merge: bool = False) -> None:
        """
        Create or overwrite a document.

        Args:
            path: Document path
            data: Fields to write
            merge: Only overwrite the top-level fields present in ``data``
        """
        pass

    @abstractmethod
    async def update(self, path: str, data: dict[str, Any]) -> None:
        """
        Merge top-level fields into an existing document.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """
        Delete a single document. Sub-collections are NOT deleted.

        Returns:
            bool: True if a document was removed
        """
        pass

    @abstractmethod
    async def list_documents(
        self,
        collection: str,
        order_by: Optional[str] = None,
    ) -> list[Document]:
        """
        List the documents directly under a collection path.

        Args:
            collection: Collection path
            order_by: Field to sort ascending by; ties are broken by document id.
                Without it, documents come back in store order.
        """
        pass

    @abstractmethod
    async def count(self, collection: str) -> int:
        """Count the documents directly under a collection path."""
        pass

    @abstractmethod
    async def commit(self, batch: WriteBatch) -> None:
        """
        Apply every operation of the batch atomically.

        Raises:
            StoreUnavailableError: Backend failure; nothing was applied
            NotFoundError: An UPDATE targeted a missing document; nothing was applied
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the store.

        Returns:
            bool: True if the store is reachable and operational
        """
        pass

    def batch(self) -> WriteBatch:
        """Start a new write batch."""
        return WriteBatch()

    async def init(self) -> None:
        """Prepare the backend (create tables, etc.). No-op by default."""

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
