"""
Profile repository for database access.

Encapsulates Supabase queries against the profiles table.
"""

from typing import Any, Optional

from shared.repository import BaseRepository
from .models import Plan, Profile


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for billing profiles.

    Note: This repository does NOT decide entitlements. The
    EntitlementResolver owns that policy.
    """

    def get_profile(self, user_id: str) -> Optional[Profile]:
        """
        Get a user's profile.

        Args:
            user_id: The user's ID.

        Returns:
            Profile, or None if the user has no profile row.
        """
        result = self._db.table("profiles").select("*").eq("id", user_id).execute()
        row = self._first_row(result)
        return self._map_to_profile(row) if row else None

    def compare_and_increment_trial(
        self,
        user_id: str,
        expected_count: int,
    ) -> Optional[Profile]:
        """
        Increment pro_trial_count by one if it still equals expected_count.

        The WHERE clause on the current value makes the update atomic at the
        storage layer: two concurrent grants cannot both move n to n+1.

        Args:
            user_id: The user's ID.
            expected_count: The count the caller read.

        Returns:
            The updated Profile, or None if another writer got there first.
        """
        result = (
            self._db.table("profiles")
            .update({"pro_trial_count": expected_count + 1})
            .eq("id", user_id)
            .eq("pro_trial_count", expected_count)
            .execute()
        )
        row = self._first_row(result)
        return self._map_to_profile(row) if row else None

    def _map_to_profile(self, data: dict[str, Any]) -> Profile:
        """Map database row to Profile model."""
        return Profile(
            id=str(data["id"]),
            plan=Plan(data.get("plan") or Plan.FREE.value),
            pro_trial_count=data.get("pro_trial_count") or 0,
            stripe_id=data.get("stripe_id"),
        )
