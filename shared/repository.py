"""
Base repository class for database access.

Wraps the Supabase client so that repositories share the same row helpers.
Repositories are synchronous; async callers push them onto worker threads.
"""

from typing import Any, Generic, Optional, TypeVar

from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Subclasses implement domain-specific queries and map rows to Pydantic
    models internally, so nothing above the repository sees raw dicts.

    Example:
        class TurnRepository(BaseRepository[Turn]):
            def get_turn(self, turn_id: str) -> Optional[Turn]:
                result = self._db.table("turns").select("*").eq("id", turn_id).execute()
                row = self._first_row(result)
                return self._map_to_turn(row) if row else None
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _first_row(result: Any) -> Optional[dict[str, Any]]:
        """Return the first row of a query result, or None when empty."""
        if not result.data:
            return None
        return result.data[0]
