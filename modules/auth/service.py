"""
Authentication service implementation.

Validates Supabase JWT tokens and resolves callers to identities.
"""

import asyncio
import logging
from typing import Optional
import jwt

from modules.billing.interfaces import IProfileRepository
from shared.config import get_settings
from shared.exceptions import AuthenticationError
from shared.models import AuthenticatedUser

from .interfaces import IAuthService
from .models import CallerIdentity, JWTPayload
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
)

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Uses Supabase JWT tokens for authentication and the profile
    repository for plan lookups.
    """

    def __init__(self, profiles: Optional[IProfileRepository] = None):
        self._settings = get_settings()
        self._profiles = profiles

    async def validate_token(self, token: str) -> AuthenticatedUser:
        """
        Validate a JWT token and return the authenticated user.

        This implementation validates Supabase JWTs using the JWT secret.
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )

            jwt_payload = JWTPayload(**payload)

            return AuthenticatedUser(
                id=jwt_payload.sub,
                email=jwt_payload.email or None,
            )

        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))

    async def resolve_caller(self, token: Optional[str]) -> CallerIdentity:
        """
        Resolve an optional bearer token into a caller identity.

        Invalid tokens fall back to anonymous access, matching how the
        turn endpoint treats callers without a session.
        """
        if not token or token == "undefined":
            return CallerIdentity()

        try:
            user = await self.validate_token(token)
        except AuthenticationError as e:
            logger.info(f"Authentication failed, continuing as anonymous: {e.message}")
            return CallerIdentity()

        profile = None
        if self._profiles is not None:
            profile = await asyncio.to_thread(self._profiles.get_profile, user.id)
            if profile is None:
                logger.warning(f"No profile found for user {user.id}")

        return CallerIdentity(user=user, profile=profile)

