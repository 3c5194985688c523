"""Shared exceptions for the hostel portal API.

Each exception carries the HTTP status it maps to at the request boundary;
see the handler registered in ``api.main``.
"""
from typing import Any, Dict, Optional


class PortalException(Exception):
    """Base exception for the hostel portal API."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class UnauthorizedError(PortalException):
    """Raised when the request carries no valid session."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "UNAUTHORIZED")


class ValidationError(PortalException):
    """Raised when input validation fails."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidArgumentError(ValidationError):
    """Raised when an operation receives a missing or contradictory identifier."""

    pass


class NotFoundError(PortalException):
    """Raised when a resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str, message: Optional[str] = None):
        message = message or f"{resource} with identifier '{identifier}' not found"
        super().__init__(message, "NOT_FOUND", {"resource": resource, "identifier": identifier})


class ForbiddenError(NotFoundError):
    """Raised when the caller may not touch a resource.

    Rendered exactly like ``NotFoundError`` so membership does not leak.
    """

    pass


class StorageUnavailableError(PortalException):
    """Raised when the database cannot serve the request."""

    status_code = 500

    def __init__(self, message: str = "Storage unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "STORAGE_UNAVAILABLE", details)
