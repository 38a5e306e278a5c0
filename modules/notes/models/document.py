"""
Document Model.

Single table backing the SQL document store. Every collection and
sub-collection path shares it; ``seq`` gives the enumeration order.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from modules.notes.core.utils import utc_now
from modules.notes.models.base import Base


class DocumentRecord(Base):
    """One document of one collection."""

    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("collection", "document_id", name="uq_documents_collection_id"),
    )

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    document_id: Mapped[str] = mapped_column(String(64), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<DocumentRecord(collection={self.collection!r}, document_id={self.document_id!r})>"
