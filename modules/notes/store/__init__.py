# Document store adapters
from modules.notes.store.base import Document, DocumentStore, Subscription, WriteBatch, subcollection
from modules.notes.store.memory import InMemoryDocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "InMemoryDocumentStore",
    "Subscription",
    "WriteBatch",
    "subcollection",
]
