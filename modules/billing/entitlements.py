"""
Model entitlement resolution.

Decides which catalogued model a turn may run on for a given caller and
plan. The decision is pure; the only side effect (using up one pro trial)
is returned on the grant and applied later by commit().

Policy:
- Unknown model: warn and fall back to the default model.
- Free-tier model: always granted.
- Paid-tier model: granted to signed-in callers on the pro plan, or on the
  free plan while pro_trial_count is below the trial limit (consumes a trial).
- Denied paid-tier model: rejected when the caller asked for it explicitly,
  downgraded to the default when it was inferred from the debate.
"""

import logging
from typing import Optional

from providers.catalog import ModelSpec, get_model_spec
from shared.models import AuthenticatedUser

from .exceptions import PlanRequiredError, ProfileNotFoundError, UnauthorizedModelError
from .interfaces import IProfileRepository
from .models import EntitlementGrant, Plan, Profile

logger = logging.getLogger(__name__)

DEFAULT_PRO_TRIAL_LIMIT = 5


class EntitlementResolver:
    """
    Resolves requested models to permitted models.

    Args:
        profiles: Profile storage used when committing trial consumption
        trial_limit: Number of paid-tier turns a free user may take
        allow_bypass: Whether the "heh" flag is honored for signed-in callers
    """

    def __init__(
        self,
        profiles: IProfileRepository,
        trial_limit: int = DEFAULT_PRO_TRIAL_LIMIT,
        allow_bypass: bool = False,
    ):
        self._profiles = profiles
        self._trial_limit = trial_limit
        self._allow_bypass = allow_bypass

    def resolve(
        self,
        requested_model: Optional[str],
        user: Optional[AuthenticatedUser],
        profile: Optional[Profile],
        default_model: str,
        explicit: bool = True,
        bypass: bool = False,
    ) -> EntitlementGrant:
        """
        Decide which model the turn runs on.

        Args:
            requested_model: Model identifier asked for
            user: Authenticated caller, None for anonymous callers
            profile: The caller's profile, if any
            default_model: Low-tier fallback model
            explicit: True when the caller named the model, False when it
                was inferred (e.g., the debate's bound model)
            bypass: Caller asked to skip entitlement checks

        Returns:
            EntitlementGrant describing the permitted model

        Raises:
            UnauthorizedModelError: Anonymous caller explicitly asked for a paid model
            PlanRequiredError: Signed-in caller is not entitled to the paid model
        """
        default_spec = get_model_spec(default_model)
        if default_spec is None:
            raise ValueError(f"Default model is not catalogued: {default_model}")

        spec = get_model_spec(requested_model)
        if spec is None:
            logger.warning(
                f"Not a valid model: {requested_model!r}, defaulted to {default_model}"
            )
            return EntitlementGrant(
                model=default_spec,
                requested_model=requested_model,
                downgraded=True,
            )

        if bypass:
            if user is not None and self._allow_bypass:
                logger.info(f"Entitlement checks bypassed for user {user.id} on {spec.model_id}")
                return EntitlementGrant(model=spec, requested_model=requested_model, bypassed=True)
            logger.warning("Ignoring validation bypass flag for this caller")

        if spec.free_tier:
            return EntitlementGrant(model=spec, requested_model=requested_model)

        if user is None:
            if explicit:
                raise UnauthorizedModelError(spec.model_id)
            return self._downgrade(spec, default_spec, "anonymous caller")

        if profile is not None and profile.plan == Plan.PRO:
            return EntitlementGrant(model=spec, requested_model=requested_model)

        if profile is not None and profile.pro_trial_count < self._trial_limit:
            return EntitlementGrant(
                model=spec,
                requested_model=requested_model,
                consume_trial=True,
            )

        if explicit:
            raise PlanRequiredError(spec.model_id, user_id=user.id, trial_limit=self._trial_limit)
        return self._downgrade(spec, default_spec, "no pro plan or trial left")

    def commit(
        self,
        grant: EntitlementGrant,
        profile: Optional[Profile],
    ) -> Optional[Profile]:
        """
        Apply the grant's side effect: use up one pro trial.

        Uses a compare-and-swap update and re-reads on a lost race, so each
        granted turn increments the counter exactly once even when the same
        user submits turns concurrently. The loop is bounded by the trial
        limit because every lost race means the count went up.

        Returns:
            The profile after the update (unchanged when no trial is consumed)

        Raises:
            PlanRequiredError: The trial limit was reached in the meantime
            ProfileNotFoundError: The profile disappeared
        """
        if not grant.consume_trial:
            return profile
        if profile is None:
            raise PlanRequiredError(grant.model.model_id)

        current = profile
        while True:
            if current.plan == Plan.PRO:
                return current
            if current.pro_trial_count >= self._trial_limit:
                raise PlanRequiredError(
                    grant.model.model_id,
                    user_id=current.id,
                    trial_limit=self._trial_limit,
                )

            updated = self._profiles.compare_and_increment_trial(
                current.id, current.pro_trial_count
            )
            if updated is not None:
                logger.info(
                    f"Pro trial {updated.pro_trial_count}/{self._trial_limit} "
                    f"used by {updated.id} on {grant.model.model_id}"
                )
                return updated

            logger.debug(f"Trial counter changed under us for {current.id}, re-reading")
            reread = self._profiles.get_profile(current.id)
            if reread is None:
                raise ProfileNotFoundError(current.id)
            current = reread

    def _downgrade(
        self,
        spec: ModelSpec,
        default_spec: ModelSpec,
        reason: str,
    ) -> EntitlementGrant:
        logger.info(f"Downgrading {spec.model_id} to {default_spec.model_id}: {reason}")
        return EntitlementGrant(
            model=default_spec,
            requested_model=spec.model_id,
            downgraded=True,
        )
