"""
Billing module.

Owns user plans, the pro trial counter, and model entitlements.

Public API:
- EntitlementResolver: Decides which model a caller may use
- IProfileRepository: Interface for profile storage
- Profile, Plan, EntitlementGrant: Data models
- Billing exceptions: PlanRequiredError, UnauthorizedModelError, etc.
"""

from .interfaces import IProfileRepository
from .models import Plan, Profile, EntitlementGrant
from .exceptions import (
    ProfileNotFoundError,
    UnauthorizedModelError,
    PlanRequiredError,
)
from .entitlements import EntitlementResolver, DEFAULT_PRO_TRIAL_LIMIT
from .repository import ProfileRepository

__all__ = [
    # Interface
    "IProfileRepository",
    # Models
    "Plan",
    "Profile",
    "EntitlementGrant",
    # Exceptions
    "ProfileNotFoundError",
    "UnauthorizedModelError",
    "PlanRequiredError",
    # Services
    "EntitlementResolver",
    "DEFAULT_PRO_TRIAL_LIMIT",
    "ProfileRepository",
]
