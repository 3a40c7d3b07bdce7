"""
Base exception classes for the Riposte backend.

Each module defines its own exceptions on top of these families. The API
layer maps a family to an HTTP status and returns `to_dict()` as the body,
so clients can branch on `error` and decide whether to retry from
`retryable` without parsing messages.
"""

from typing import Optional, Any


class RiposteError(Exception):
    """
    Base exception for all Riposte errors.

    Attributes:
        message: Human-readable description
        code: Stable machine-readable code (defaults to the class name)
        details: Extra context for the client
        retryable: Whether the same request may succeed later
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


class NotFoundError(RiposteError):
    """Resource not found."""

    pass


class ValidationError(RiposteError):
    """Input validation failed."""

    pass


class ConflictError(RiposteError):
    """The request is valid but does not fit the resource's current state."""

    pass


class AuthenticationError(RiposteError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(RiposteError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(RiposteError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.retryable = retryable
        self.details["service"] = service
