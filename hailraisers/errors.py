"""Custom exception classes for the application."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Error categories surfaced to the person filling in the forms."""

    VALIDATION_REJECTED = "ValidationRejected"
    DUPLICATE_NAME = "DuplicateName"
    NOT_FOUND = "NotFound"
    PERMISSION_DENIED = "PermissionDenied"
    TRANSIENT_NETWORK = "TransientNetwork"
    UNKNOWN = "Unknown"


class AppError(Exception):
    """Base application error class."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.messages = [message]

    def to_dict(self):
        """Serialize the error for a JSON response body."""
        return {
            "error": self.kind.value,
            "message": self.message,
            "fields": list(self.messages),
        }


class ValidationError(AppError):
    """Raised when user input fails validation."""

    kind = ErrorKind.VALIDATION_REJECTED

    def __init__(self, message="Validation failed.", messages=None):
        """Initialize the error."""
        super().__init__(message, 400)
        self.messages = list(messages) if messages else [message]


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    kind = ErrorKind.DUPLICATE_NAME

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class PermissionDeniedError(AppError):
    """Raised when the backing store refuses the operation."""

    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, message="Permission denied."):
        """Initialize the error."""
        super().__init__(message, 403)


class TransientNetworkError(AppError):
    """Raised when an upstream call failed in a way worth retrying."""

    kind = ErrorKind.TRANSIENT_NETWORK

    def __init__(self, message="A network error occurred."):
        """Initialize the error."""
        super().__init__(message, 503)


class ConfigurationError(AppError):
    """Raised when a required credential or setting is missing."""

    def __init__(self, message="The service is not configured."):
        """Initialize the error."""
        super().__init__(message, 500)


class PlaceLookupError(AppError):
    """Raised when the places API answers with an error status."""

    def __init__(self, message="Place lookup failed."):
        """Initialize the error."""
        super().__init__(message, 502)
