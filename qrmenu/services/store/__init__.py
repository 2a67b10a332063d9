"""
Document Store Factory

Provides a single entry point for obtaining a document store instance.
The rest of the application stays agnostic about which backend is used.

Usage:
    from qrmenu.services.store import get_document_store

    store = get_document_store()
    tenant = await store.get("restaurants/main-restaurant")

Environment Switching:
    - ENV_MODE=development → MemoryDocumentStore (no database)
    - ENV_MODE=staging → SqlDocumentStore
    - ENV_MODE=production → SqlDocumentStore
"""

import logging
from functools import lru_cache

from qrmenu.core.config import get_settings
from qrmenu.services.store.base import (
    BaseDocumentStore,
    BatchOperation,
    BatchOperationType,
    Document,
    WriteBatch,
    document_id,
    join_path,
    parent_path,
    run_with_timeout,
)
from qrmenu.services.store.memory import MemoryDocumentStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_document_store() -> BaseDocumentStore:
    """
    Get the configured document store instance.

    The instance is cached (singleton) so the in-memory store keeps its
    state for the lifetime of the process.

    Returns:
        BaseDocumentStore: Configured document store
    """
    settings = get_settings()

    if settings.use_sql_store:
        # Imported lazily so development mode does not need a database driver
        from qrmenu.services.store.sql import SqlDocumentStore

        logger.info(
            f"Document Store: Using SqlDocumentStore "
            f"({settings.env_mode.value} mode)"
        )
        return SqlDocumentStore()

    logger.info("Document Store: Using MemoryDocumentStore (development mode)")
    return MemoryDocumentStore()


def reset_document_store() -> None:
    """
    Clear the cached document store instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_document_store.cache_clear()
    logger.debug("Document store cache cleared")


__all__ = [
    "get_document_store",
    "reset_document_store",
    "BaseDocumentStore",
    "BatchOperation",
    "BatchOperationType",
    "Document",
    "WriteBatch",
    "MemoryDocumentStore",
    "document_id",
    "join_path",
    "parent_path",
    "run_with_timeout",
]
