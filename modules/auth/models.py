"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from typing import Optional
from pydantic import BaseModel, Field

from modules.billing.models import Profile
from shared.models import AuthenticatedUser


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")


class CallerIdentity(BaseModel):
    """
    Who is making a request.

    Anonymous callers have neither user nor profile; they identify
    themselves with a userId in the request body instead.
    """

    user: Optional[AuthenticatedUser] = Field(None, description="Signed-in user")
    profile: Optional[Profile] = Field(None, description="Signed-in user's profile")

    model_config = {"frozen": True}

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def resolve_user_id(self, fallback: Optional[str] = None) -> Optional[str]:
        """The signed-in user's ID, else the caller-supplied fallback."""
        if self.user is not None:
            return self.user.id
        return fallback or None
