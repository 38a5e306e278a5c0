"""
Base Repository.

Base class for repositories over one document store collection.
"""

from typing import Any, Generic, TypeVar

from modules.notes.core.exceptions import NotFoundError
from modules.notes.core.logging import get_logger
from modules.notes.store.base import Document, DocumentStore

logger = get_logger(__name__)

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common read operations.

    Subclasses should set the model class, which must provide
    ``from_document``:

        class NoteRepository(BaseRepository[Note]):
            model = Note
    """

    model: type[ModelType]

    def __init__(self, store: DocumentStore, collection: str) -> None:
        self.store = store
        self.collection = collection

    async def get_by_id(self, id: str) -> ModelType:
        """
        Get a single document by ID.

        Raises:
            NotFoundError: If the document does not exist
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found: {id}")
        return instance

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get a single document by ID, returning None if not found."""
        fields = await self.store.get_document(self.collection, id)
        if fields is None:
            return None
        return self._to_model(Document(id=id, fields=fields))

    async def get_all(self) -> list[ModelType]:
        """Get all documents in enumeration order."""
        documents = await self.store.list_documents(self.collection)
        return [self._to_model(document) for document in documents]

    async def exists(self, id: str) -> bool:
        """Check if a document exists by ID."""
        return await self.store.get_document(self.collection, id) is not None

    def _to_model(self, document: Document) -> ModelType:
        model: Any = self.model
        return model.from_document(document)
