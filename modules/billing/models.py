"""
Billing module data models.

Profiles carry the plan and the pro trial counter that entitlement
decisions are made from.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from providers.catalog import ModelSpec


class Plan(str, Enum):
    """User subscription plans."""

    FREE = "free"
    PRO = "pro"


class Profile(BaseModel):
    """
    A user's billing profile.

    plan is changed only by the billing webhook. pro_trial_count is changed
    only by the entitlement resolver and never decreases.
    """

    id: str = Field(..., description="User ID (matches auth user ID)")
    plan: Plan = Field(default=Plan.FREE, description="Subscription plan")
    pro_trial_count: int = Field(
        default=0,
        ge=0,
        description="Number of paid-tier turns granted on the free trial",
    )
    stripe_id: Optional[str] = Field(None, description="Stripe customer ID")


class EntitlementGrant(BaseModel):
    """
    Result of an entitlement decision.

    consume_trial is a deferred side effect: the caller applies it with
    EntitlementResolver.commit() once the turn is actually going ahead.
    """

    model: ModelSpec = Field(..., description="Model the turn will run on")
    requested_model: Optional[str] = Field(None, description="Model asked for")
    consume_trial: bool = Field(default=False, description="Whether a pro trial is used")
    downgraded: bool = Field(default=False, description="Whether a fallback was applied")
    bypassed: bool = Field(default=False, description="Whether checks were skipped")
