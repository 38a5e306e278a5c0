"""
Document Store Contract.

Base class for the persistent document store the note core runs on.
Documents are plain field dicts keyed by id inside named collections;
a sub-collection is addressed by the path ``{collection}/{id}/{name}``.

Writes go through a WriteBatch, which is applied all-or-nothing.
Every committed batch triggers a fresh snapshot of each touched
collection to that collection's subscribers. Delivery is asynchronous:
a caller that reads a subscriber's state right after a write may see
the previous snapshot until the worker task runs.

Usage:
    store = InMemoryDocumentStore()

    subscription = await store.subscribe("notes", on_snapshot)

    batch = store.batch()
    batch.create("notes/abc/history", {...})
    batch.update("notes", "abc", {...})
    await batch.commit()

    await subscription.wait_idle()
    subscription.unsubscribe()
"""

import asyncio
import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from modules.notes.core.exceptions import StoreUnavailableError
from modules.notes.core.logging import get_logger, log_with_source
from modules.notes.core.utils import MonotonicClock

logger = get_logger(__name__)

SnapshotCallback = Callable[[list["Document"]], Awaitable[None] | None]


def subcollection(collection: str, document_id: str, name: str) -> str:
    """Path of the ``name`` sub-collection under one document."""
    return f"{collection}/{document_id}/{name}"


def new_document_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class Document:
    """One stored document: its id and a copy of its fields."""

    id: str
    fields: dict[str, Any] = field(default_factory=dict)


class WriteKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class WriteOp:
    kind: WriteKind
    collection: str
    document_id: str
    fields: dict[str, Any] | None = None


class WriteBatch:
    """
    Staged writes applied as a single unit.

    ``create`` assigns the new document id at staging time so callers
    can reference it before the batch is committed. Updates merge the
    given fields into the stored document.
    """

    def __init__(self, store: "DocumentStore") -> None:
        self._store = store
        self._ops: list[WriteOp] = []
        self._committed = False

    @property
    def ops(self) -> list[WriteOp]:
        return list(self._ops)

    def create(self, collection: str, fields: dict[str, Any]) -> str:
        document_id = new_document_id()
        self._ops.append(WriteOp(WriteKind.CREATE, collection, document_id, dict(fields)))
        return document_id

    def update(self, collection: str, document_id: str, fields: dict[str, Any]) -> None:
        self._ops.append(WriteOp(WriteKind.UPDATE, collection, document_id, dict(fields)))

    def delete(self, collection: str, document_id: str) -> None:
        self._ops.append(WriteOp(WriteKind.DELETE, collection, document_id))

    async def commit(self) -> None:
        """
        Apply every staged write, or none of them.

        Raises:
            RuntimeError: If the batch was already committed
            NotFoundError: If an update or delete targets a missing document
            StoreUnavailableError: If the store fails to apply the batch
        """
        if self._committed:
            raise RuntimeError("WriteBatch already committed")
        self._committed = True
        if self._ops:
            await self._store.commit_batch(list(self._ops))


class Subscription:
    """
    Push delivery of collection snapshots to one callback.

    Snapshots are queued and handed to the callback one at a time by a
    dedicated worker task, so the callback never runs concurrently with
    itself. A callback that raises is logged and delivery continues.
    """

    def __init__(
        self,
        collection: str,
        callback: SnapshotCallback,
        on_close: Callable[["Subscription"], None] | None = None,
    ) -> None:
        self.collection = collection
        self._callback = callback
        self._on_close = on_close
        self._queue: asyncio.Queue[list[Document]] = asyncio.Queue()
        self._active = True
        self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def active(self) -> bool:
        return self._active

    def deliver(self, documents: list[Document]) -> None:
        if self._active:
            self._queue.put_nowait(list(documents))

    async def wait_idle(self) -> None:
        """Wait until every snapshot queued so far has been handled."""
        if self._active:
            await self._queue.join()

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._task.cancel()
        # Release anyone blocked in wait_idle on snapshots that will never run
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
        if self._on_close is not None:
            self._on_close(self)

    async def _run(self) -> None:
        while True:
            documents = await self._queue.get()
            try:
                result = self._callback(documents)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Snapshot callback failed",
                    extra={"collection": self.collection},
                )
            finally:
                self._queue.task_done()


class DocumentStore(ABC):
    """
    Base class for document store adapters.

    Subclasses implement reads and the all-or-nothing application of a
    list of writes; batching, single-document helpers, subscriptions and
    the clock are shared.
    """

    def __init__(self) -> None:
        self._clock = MonotonicClock()
        self._subscriptions: list[Subscription] = []
        # Serializes commits and snapshot reads so subscribers see them in commit order
        self._snapshot_lock = asyncio.Lock()

    def now(self) -> datetime:
        """Monotonically non-decreasing UTC timestamp."""
        return self._clock.now()

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    async def create_document(self, collection: str, fields: dict[str, Any]) -> str:
        batch = self.batch()
        document_id = batch.create(collection, fields)
        await batch.commit()
        return document_id

    async def update_document(self, collection: str, document_id: str, fields: dict[str, Any]) -> None:
        batch = self.batch()
        batch.update(collection, document_id, fields)
        await batch.commit()

    async def delete_document(self, collection: str, document_id: str) -> None:
        batch = self.batch()
        batch.delete(collection, document_id)
        await batch.commit()

    @abstractmethod
    async def get_document(self, collection: str, document_id: str) -> dict[str, Any] | None:
        """Fields of one document, or None if it does not exist."""

    @abstractmethod
    async def list_documents(self, collection: str) -> list[Document]:
        """All documents of a collection in the store's enumeration order."""

    @abstractmethod
    async def _apply(self, ops: list[WriteOp]) -> None:
        """Apply all writes atomically."""

    async def commit_batch(self, ops: list[WriteOp]) -> None:
        async with self._snapshot_lock:
            await self._apply(ops)
            logger.debug("Batch committed", extra={"writes": len(ops)})
            await self._notify(list(dict.fromkeys(op.collection for op in ops)))

    async def subscribe(self, collection: str, callback: SnapshotCallback) -> Subscription:
        """
        Register ``callback`` for snapshots of ``collection``.

        The callback fires once with the current contents, then again after
        every committed change to the collection. If the initial read fails
        nothing is registered and the error propagates.
        """
        async with self._snapshot_lock:
            documents = await self.list_documents(collection)
            subscription = Subscription(collection, callback, on_close=self._subscriptions.remove)
            self._subscriptions.append(subscription)
            subscription.deliver(documents)
        return subscription

    async def close(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    async def _notify(self, collections: list[str]) -> None:
        for collection in collections:
            subscribers = [s for s in self._subscriptions if s.collection == collection]
            if not subscribers:
                continue
            try:
                documents = await self.list_documents(collection)
            except StoreUnavailableError as e:
                # The write itself is durable; the next successful commit re-delivers.
                log_with_source(
                    logger, "store", "error", "Snapshot read failed after commit",
                    collection=collection, error=e.message,
                )
                continue
            for subscription in subscribers:
                subscription.deliver(documents)
