"""
SQLAlchemy Database Models

The SQL store keeps every document of every collection in a single
table, keyed by its full path. The parent collection path is indexed
so listing a collection is a single indexed query.
"""

from sqlalchemy import JSON, Column, DateTime, String
from sqlalchemy.sql import func

from qrmenu.database import Base


class StoredDocument(Base):
    """
    One document of the menu document store.

    Example rows:
        path=restaurants/main-restaurant                collection=restaurants
        path=restaurants/main-restaurant/categories/x   collection=restaurants/main-restaurant/categories
    """
    __tablename__ = "documents"

    path = Column(String(512), primary_key=True)
    collection = Column(String(512), nullable=False, index=True)
    doc_id = Column(String(255), nullable=False)
    data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<StoredDocument {self.path}>"
