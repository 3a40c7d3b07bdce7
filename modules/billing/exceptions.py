"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from typing import Optional

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
)


class ProfileNotFoundError(NotFoundError):
    """Raised when a user's profile row does not exist."""

    def __init__(self, user_id: str):
        super().__init__(
            f"Profile not found: {user_id}",
            code="PROFILE_NOT_FOUND",
            details={"user_id": user_id},
        )


class UnauthorizedModelError(AuthenticationError):
    """Raised when an anonymous caller asks for a paid-tier model."""

    def __init__(self, model: str):
        super().__init__(
            f"Sign in to use model: {model}",
            code="UNAUTHORIZED_MODEL",
            details={"model": model},
        )


class PlanRequiredError(AuthorizationError):
    """
    Raised when a signed-in user is not entitled to a paid-tier model.

    The UI should prompt the user to upgrade to the pro plan.
    """

    def __init__(
        self,
        model: str,
        user_id: Optional[str] = None,
        trial_limit: Optional[int] = None,
    ):
        super().__init__(
            f"Pro plan required for model: {model}",
            code="PLAN_REQUIRED",
            details={"model": model},
        )
        if user_id:
            self.details["user_id"] = user_id
        if trial_limit is not None:
            self.details["trial_limit"] = trial_limit
