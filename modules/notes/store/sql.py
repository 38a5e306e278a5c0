"""
SQL Document Store.

SQLAlchemy async adapter. Each committed batch is one database
transaction, so multi-document writes (archive then overwrite) either
land together or not at all. SQLAlchemy failures surface as
StoreUnavailableError and are not retried here.

Usage:
    store = SqlDocumentStore.from_config()
    await store.create_schema()
    ...
    await store.close()
"""

from collections.abc import Awaitable
from pathlib import Path
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from modules.notes.core.exceptions import NotFoundError, StoreUnavailableError
from modules.notes.core.logging import get_logger
from modules.notes.models.base import Base
from modules.notes.models.document import DocumentRecord
from modules.notes.store.base import Document, DocumentStore, WriteKind, WriteOp

logger = get_logger(__name__)

T = TypeVar("T")

SQLITE_FILE_PREFIX = "sqlite+aiosqlite:///"


class SqlDocumentStore(DocumentStore):
    """Document store persisted in a relational database."""

    def __init__(self, url: str, echo: bool = False) -> None:
        super().__init__()
        if url.startswith("sqlite") and ":memory:" in url:
            # One shared connection, otherwise every session sees an empty database
            engine = create_async_engine(
                url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            if url.startswith(SQLITE_FILE_PREFIX):
                Path(url[len(SQLITE_FILE_PREFIX):]).parent.mkdir(parents=True, exist_ok=True)
            engine = create_async_engine(url, echo=echo)
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_config(cls) -> "SqlDocumentStore":
        """Build a store from database.yaml."""
        from modules.notes.core.config import get_app_config, get_database_url

        return cls(get_database_url(), echo=get_app_config().database.echo)

    async def create_schema(self) -> None:
        """Create the documents table if it does not exist."""
        await self._execute(
            "create_schema",
            self._create_schema(),
        )

    async def close(self) -> None:
        await super().close()
        await self._engine.dispose()

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any] | None:
        return await self._execute("get_document", self._get_document(collection, document_id))

    async def list_documents(self, collection: str) -> list[Document]:
        return await self._execute("list_documents", self._list_documents(collection))

    async def _apply(self, ops: list[WriteOp]) -> None:
        await self._execute("apply_batch", self._apply_ops(ops))

    async def _execute(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Run a database operation, converting SQLAlchemy failures.

        Raises:
            StoreUnavailableError: For any SQLAlchemy error
        """
        try:
            return await coro
        except SQLAlchemyError as e:
            logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise StoreUnavailableError(f"Document store operation failed: {operation}") from e

    async def _create_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def _get_document(self, collection: str, document_id: str) -> dict[str, Any] | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(DocumentRecord.data)
                .where(DocumentRecord.collection == collection)
                .where(DocumentRecord.document_id == document_id)
            )
            data = result.scalar_one_or_none()
            return dict(data) if data is not None else None

    async def _list_documents(self, collection: str) -> list[Document]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(DocumentRecord)
                .where(DocumentRecord.collection == collection)
                .order_by(DocumentRecord.seq)
            )
            return [
                Document(id=record.document_id, fields=dict(record.data))
                for record in result.scalars().all()
            ]

    async def _apply_ops(self, ops: list[WriteOp]) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                for op in ops:
                    if op.kind is WriteKind.CREATE:
                        session.add(
                            DocumentRecord(
                                collection=op.collection,
                                document_id=op.document_id,
                                data=dict(op.fields or {}),
                            )
                        )
                        continue

                    result = await session.execute(
                        select(DocumentRecord)
                        .where(DocumentRecord.collection == op.collection)
                        .where(DocumentRecord.document_id == op.document_id)
                    )
                    record = result.scalar_one_or_none()
                    if record is None:
                        raise NotFoundError(f"Document {op.collection}/{op.document_id} not found")

                    if op.kind is WriteKind.UPDATE:
                        record.data = {**record.data, **(op.fields or {})}
                    else:
                        await session.delete(record)
