"""
In-Memory Document Store.

Dict-backed adapter. Collections enumerate in insertion order.
Used by the test suite and for throwaway sessions.
"""

import copy
from typing import Any

from modules.notes.core.exceptions import NotFoundError
from modules.notes.store.base import Document, DocumentStore, WriteKind, WriteOp


class InMemoryDocumentStore(DocumentStore):
    """Document store held entirely in process memory."""

    def __init__(self) -> None:
        super().__init__()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any] | None:
        fields = self._collections.get(collection, {}).get(document_id)
        return copy.deepcopy(fields) if fields is not None else None

    async def list_documents(self, collection: str) -> list[Document]:
        return [
            Document(id=document_id, fields=copy.deepcopy(fields))
            for document_id, fields in self._collections.get(collection, {}).items()
        ]

    async def _apply(self, ops: list[WriteOp]) -> None:
        # Stage against copies so a failing op leaves the store untouched.
        staged = {name: dict(docs) for name, docs in self._collections.items()}

        for op in ops:
            docs = staged.setdefault(op.collection, {})
            if op.kind is WriteKind.CREATE:
                docs[op.document_id] = copy.deepcopy(op.fields or {})
            elif op.document_id not in docs:
                raise NotFoundError(f"Document {op.collection}/{op.document_id} not found")
            elif op.kind is WriteKind.UPDATE:
                docs[op.document_id] = {**docs[op.document_id], **copy.deepcopy(op.fields or {})}
            else:
                del docs[op.document_id]

        self._collections = staged
