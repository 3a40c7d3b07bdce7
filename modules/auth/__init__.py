"""
Authentication module.

Handles JWT validation and caller identity resolution.

Public API:
- IAuthService: Interface for auth operations
- CallerIdentity: Signed-in user and profile, or anonymous
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .models import CallerIdentity, JWTPayload
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    UserNotFoundError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "CallerIdentity",
    "JWTPayload",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "UserNotFoundError",
]
