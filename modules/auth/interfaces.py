"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import CallerIdentity


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        Args:
            token: JWT access token from Supabase Auth

        Returns:
            AuthenticatedUser with user ID and basic info

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        ...

    async def resolve_caller(self, token: Optional[str]) -> CallerIdentity:
        """
        Resolve an optional bearer token into a caller identity.

        A missing or invalid token yields an anonymous identity rather
        than an error; endpoints decide whether anonymous access is allowed.

        Args:
            token: Bearer token, or None

        Returns:
            CallerIdentity with the user and profile when signed in
        """
        ...
