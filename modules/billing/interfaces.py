"""
Billing module interface.

The entitlement resolver depends on IProfileRepository rather than the
Supabase implementation, so tests can swap in an in-memory store.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import Profile


@runtime_checkable
class IProfileRepository(Protocol):
    """
    Interface for profile storage.

    Implementations must make compare_and_increment_trial atomic.
    """

    def get_profile(self, user_id: str) -> Optional[Profile]:
        """
        Get a user's profile.

        Args:
            user_id: User ID

        Returns:
            Profile if found, None otherwise
        """
        ...

    def compare_and_increment_trial(
        self,
        user_id: str,
        expected_count: int,
    ) -> Optional[Profile]:
        """
        Conditionally increment the pro trial counter.

        Args:
            user_id: User ID
            expected_count: The value the caller last read

        Returns:
            Updated profile, or None when the stored count no longer
            equals expected_count
        """
        ...
