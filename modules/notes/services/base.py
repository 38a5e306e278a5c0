"""
Base Service.

Base class for services. Services orchestrate repositories, apply
business rules, and log operations with a consistent shape.

Usage:
    from modules.notes.services.base import BaseService

    class NoteService(BaseService):
        def __init__(self, store: DocumentStore) -> None:
            super().__init__(store)
            self.repo = NoteRepository(store)
"""

from typing import Any

from modules.notes.core.exceptions import ValidationError
from modules.notes.core.logging import get_logger
from modules.notes.schemas.note import Category
from modules.notes.store.base import DocumentStore


class BaseService:
    """
    Base class for all services.

    Provides:
    - Document store access
    - Logging context
    - Common validation patterns
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._logger = get_logger(self.__class__.__module__)

    @property
    def store(self) -> DocumentStore:
        """Get the document store."""
        return self._store

    def _validate_category(self, category: Category | str | None) -> Category | None:
        """
        Coerce an optional category selection.

        Raises:
            ValidationError: If the value is not one of the fixed categories
        """
        if not category:
            return None
        try:
            return Category(category)
        except ValueError as e:
            raise ValidationError(
                "Unknown category",
                details={"category": f"Must be one of {[c.value for c in Category]}"},
            ) from e

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """Log a service operation with context."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """Log debug information."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
