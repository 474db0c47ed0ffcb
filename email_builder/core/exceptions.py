"""
Custom exceptions for the email builder.

Provides a hierarchy of exceptions for better error handling and debugging.
"""

from typing import Any, Dict, Optional


class EmailBuilderError(Exception):
    """Base exception for all email builder errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(EmailBuilderError):
    """Raised when there are configuration issues."""
    pass


class DocumentValidationError(EmailBuilderError):
    """A document or block failed schema validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []


class DocumentOperationError(EmailBuilderError):
    """An editor mutation could not be applied to the document."""
    pass


class RenderError(EmailBuilderError):
    """Rendering a document to markup failed."""
    pass


class FeedFetchError(EmailBuilderError):
    """Fetching an XML feed failed."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(f"{url}: {message}", **kwargs)
        self.url = url
        self.status_code = status_code


class ApiClientError(EmailBuilderError):
    """The templates API returned an error or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class AppError(EmailBuilderError):
    """Errors that map directly onto an HTTP response."""

    status_code: int = 500
    code: str = "ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code


class NotFoundError(AppError):
    """Requested resource does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} with {identifier} not found" if identifier else f"{resource} not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class ConflictError(AppError):
    """Resource already exists."""

    status_code = 409
    code = "CONFLICT"


class ValidationError(AppError):
    """Request payload failed validation."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
