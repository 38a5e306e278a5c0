"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Every note store operation either completes or raises one of these.
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when an operation targets a document that does not exist."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when input fields are malformed."""

    def __init__(self, message: str = "Validation failed", details: dict[str, Any] | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class PermissionDeniedError(ApplicationError):
    """Raised when the acting identity may not perform the requested mutation."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, code="AUTHZ_FORBIDDEN")


class ConflictError(ApplicationError):
    """Raised when a write precondition no longer matches the stored state."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class StoreUnavailableError(ApplicationError):
    """Raised when the document store fails to complete a read or write."""

    def __init__(self, message: str = "Document store unavailable") -> None:
        super().__init__(message, code="SYS_STORE_UNAVAILABLE")
