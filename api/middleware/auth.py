"""
Caller identity dependency.

Turns an optional Supabase bearer token into a CallerIdentity. Debate
endpoints accept anonymous callers, so a missing or invalid token never
fails the request on its own.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_auth_service
from modules.auth.interfaces import IAuthService
from modules.auth.models import CallerIdentity

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


async def get_caller_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: IAuthService = Depends(get_auth_service),
) -> CallerIdentity:
    """
    Dependency that resolves the caller, signed in or anonymous.

    Usage:
        @router.post("/{debate_id}/turn")
        async def take_turn(caller: CallerIdentity = Depends(get_caller_identity)):
            if caller.is_authenticated:
                ...
    """
    token = credentials.credentials if credentials else None
    return await auth.resolve_caller(token)
