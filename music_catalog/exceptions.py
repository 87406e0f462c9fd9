"""Exception hierarchy for the music catalog.

Every error the engine raises on purpose derives from :class:`CatalogError`
and knows the HTTP status it maps to. ``register_exception_handlers`` turns
them into ``{"error", "message", "details"?}`` JSON bodies.
"""
from typing import Any, List, Optional


class CatalogError(Exception):
    """Base class for catalog errors mapped to an HTTP response."""

    status_code: int = 500
    error: str = "Internal server error"
    default_message: str = "Something went wrong on our end"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        error: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        self.message = message or self.default_message
        if error is not None:
            self.error = error
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.error, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class MalformedIdentifierError(CatalogError):
    """Raised when a path or body identifier is not a well-formed id."""

    status_code = 400
    error = "Invalid ID format"
    default_message = "Please provide a valid 24-character hexadecimal ID"

    def __init__(self, label: str, message: Optional[str] = None) -> None:
        super().__init__(message, error=f"Invalid {label.lower()} ID format")


class ValidationFailedError(CatalogError):
    """Raised with every violated field rule of a candidate record."""

    status_code = 400
    error = "Validation failed"
    default_message = "Please correct the following errors"

    def __init__(self, details: List[str], message: Optional[str] = None) -> None:
        super().__init__(message, details=list(details))


class ReferenceNotFoundError(CatalogError):
    """Raised when a reference field points at a record that does not exist."""

    status_code = 400
    error = "Reference not found"
    default_message = "A referenced record does not exist"


class InvalidLimitError(CatalogError):
    status_code = 400
    error = "Invalid limit"
    default_message = "Limit cannot exceed 100 items per page"


class DeleteBlockedError(CatalogError):
    """Raised when a record cannot be deleted while other records reference it."""

    status_code = 400
    error = "Cannot delete record"
    default_message = "The record is still referenced by other records"


class DuplicateEntityError(CatalogError):
    status_code = 409
    error = "Duplicate record"
    default_message = "A record with these values already exists"


class NotFoundError(CatalogError):
    status_code = 404
    error = "Not found"
    default_message = "No record exists with the provided ID"


class UnauthorizedError(CatalogError):
    status_code = 401
    error = "Authentication required"
    default_message = "Please log in to access this resource"
