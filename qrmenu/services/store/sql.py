"""
SQL Document Store Implementation

Production implementation on top of SQLAlchemy's async engine.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - DATABASE_URL must point to a reachable database
      (postgresql+psycopg://... by default)

Every method runs in its own transaction; commit(batch) runs the whole
batch in one transaction, so a failure rolls every operation back.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from qrmenu.core.exceptions import NotFoundError, StoreUnavailableError
from qrmenu.database import create_engine, create_session_maker, init_db
from qrmenu.models import StoredDocument
from qrmenu.services.store.base import (
    BaseDocumentStore,
    BatchOperationType,
    Document,
    WriteBatch,
    document_id,
    parent_path,
)

logger = logging.getLogger(__name__)


class SqlDocumentStore(BaseDocumentStore):
    """
    Document store persisted in a single SQL table.

    Example:
        >>> store = SqlDocumentStore()
        >>> await store.init()
        >>> await store.set("restaurants/r", {"info": {"name": "Cafe"}}, merge=True)
    """

    def __init__(self, engine: Optional[AsyncEngine] = None):
        self.engine = engine or create_engine()
        self._session_maker = create_session_maker(self.engine)
        logger.info(f"SqlDocumentStore initialized ({self.engine.url.render_as_string(hide_password=True)})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "sql"

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        """Open a session with a transaction; map driver errors to StoreUnavailableError."""
        try:
            async with self._session_maker() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as e:
            logger.error(f"Document store error: {e}")
            raise StoreUnavailableError(str(e)) from e
        except OSError as e:
            logger.error(f"Document store connection error: {e}")
            raise StoreUnavailableError(str(e)) from e

    @staticmethod
    async def _write(
        session: AsyncSession,
        path: str,
        data: dict[str, Any],
        merge: bool,
        must_exist: bool = False,
    ) -> None:
        row = await session.get(StoredDocument, path)
        if row is None:
            if must_exist:
                raise NotFoundError("document", path)
            session.add(StoredDocument(
                path=path,
                collection=parent_path(path),
                doc_id=document_id(path),
                data=dict(data),
            ))
        elif merge:
            # Reassign so the JSON column is flagged as changed
            row.data = {**row.data, **data}
        else:
            row.data = dict(data)

    async def get(self, path: str) -> Optional[dict[str, Any]]:
        async with self._transaction() as session:
            row = await session.get(StoredDocument, path)
            return dict(row.data) if row is not None else None

    async def set(self, path: str, data: dict[str, Any], merge: bool = False) -> None:
        async with self._transaction() as session:
            await self._write(session, path, data, merge)

    async def update(self, path: str, data: dict[str, Any]) -> None:
        async with self._transaction() as session:
            await self._write(session, path, data, merge=True, must_exist=True)

    async def delete(self, path: str) -> bool:
        async with self._transaction() as session:
            row = await session.get(StoredDocument, path)
            if row is None:
                return False
            await session.delete(row)
            return True

    async def list_documents(
        self,
        collection: str,
        order_by: Optional[str] = None,
    ) -> list[Document]:
        async with self._transaction() as session:
            result = await session.execute(
                select(StoredDocument)
                .where(StoredDocument.collection == collection)
                .order_by(StoredDocument.created_at, StoredDocument.path)
            )
            documents = [
                Document(id=row.doc_id, path=row.path, data=dict(row.data))
                for row in result.scalars().all()
            ]
        if order_by:
            documents.sort(key=lambda d: (d.data.get(order_by) is None, d.data.get(order_by) or 0, d.id))
        return documents

    async def count(self, collection: str) -> int:
        async with self._transaction() as session:
            result = await session.execute(
                select(func.count()).select_from(StoredDocument).where(
                    StoredDocument.collection == collection
                )
            )
            return result.scalar() or 0

    async def commit(self, batch: WriteBatch) -> None:
        async with self._transaction() as session:
            for operation in batch.operations:
                if operation.op == BatchOperationType.DELETE:
                    row = await session.get(StoredDocument, operation.path)
                    if row is not None:
                        await session.delete(row)
                elif operation.op == BatchOperationType.UPDATE:
                    await self._write(session, operation.path, operation.data or {}, merge=True, must_exist=True)
                else:
                    await self._write(session, operation.path, operation.data or {}, operation.merge)
                # Keep get() inside the batch consistent with earlier operations
                await session.flush()
        logger.debug(f"Committed batch of {len(batch)} operations")

    async def health_check(self) -> bool:
        try:
            async with self._transaction() as session:
                await session.execute(text("SELECT 1"))
            return True
        except StoreUnavailableError:
            return False

    async def init(self) -> None:
        try:
            await init_db(self.engine)
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailableError(str(e)) from e
        logger.info("✅ Document table ready")

    async def close(self) -> None:
        await self.engine.dispose()
