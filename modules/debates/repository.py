"""
Debate repository for database access.

Encapsulates all Supabase queries and data mapping for debate-related tables:
- debates
- turns
"""

from datetime import datetime
from typing import Any, Optional

from shared.repository import BaseRepository
from .exceptions import DebateNotFoundError, UnknownSpeakerError
from .models import (
    Debate,
    NewDebate,
    NewTurn,
    Speaker,
    Turn,
)


class DebateRepository(BaseRepository[Debate]):
    """
    Repository for debate data access.

    Handles all database operations for debates and their turns.
    All methods return Pydantic models with proper mapping from database rows.

    Note: This repository does NOT perform authorization checks or decide
    turn order. The service layer serializes turns per debate.
    """

    # -------------------------------------------------------------------------
    # Debate operations
    # -------------------------------------------------------------------------

    def get_debate(self, debate_id: str) -> Debate:
        """
        Get a debate by ID.

        Args:
            debate_id: The debate UUID.

        Returns:
            The debate.

        Raises:
            DebateNotFoundError: If no row matches.
        """
        result = self._db.table("debates").select("*").eq("id", debate_id).execute()
        row = self._first_row(result)
        if row is None:
            raise DebateNotFoundError(debate_id)
        return self._map_to_debate(row)

    def create_debate(self, debate: NewDebate) -> Debate:
        """
        Create a new debate record.

        Args:
            debate: Insert payload.

        Returns:
            Created Debate with generated ID and timestamps.
        """
        result = self._db.table("debates").insert(debate.model_dump()).execute()
        return self._map_to_debate(result.data[0])

    # -------------------------------------------------------------------------
    # Turn operations
    # -------------------------------------------------------------------------

    def get_turns(self, debate_id: str) -> list[Turn]:
        """
        Get all turns for a debate, oldest first.

        Args:
            debate_id: The debate UUID.

        Returns:
            Turns ordered by order_number ascending. Empty for a new debate.
        """
        result = (
            self._db.table("turns")
            .select("*")
            .eq("debate_id", debate_id)
            .order("order_number")
            .execute()
        )
        return [self._map_to_turn(row) for row in result.data or []]

    def insert_turn(self, turn: NewTurn) -> Turn:
        """
        Insert a turn.

        Args:
            turn: Insert payload.

        Returns:
            The stored Turn.
        """
        result = self._db.table("turns").insert(turn.model_dump(mode="json")).execute()
        return self._map_to_turn(result.data[0])

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def _map_to_debate(self, data: dict[str, Any]) -> Debate:
        """Map database row to Debate model."""
        return Debate(
            id=data["id"],
            topic=data["topic"],
            short_topic=data.get("short_topic") or data["topic"],
            persona=data["persona"],
            model=data["model"],
            user_id=data.get("user_id"),
            created_at=self._parse_timestamp(data.get("created_at")),
        )

    def _map_to_turn(self, data: dict[str, Any]) -> Turn:
        """Map database row to Turn model."""
        try:
            speaker = Speaker(data["speaker"])
        except ValueError:
            raise UnknownSpeakerError(
                str(data["speaker"]), data["debate_id"], data.get("order_number")
            )
        return Turn(
            id=str(data["id"]),
            debate_id=data["debate_id"],
            speaker=speaker,
            content=data["content"],
            order_number=data["order_number"],
            model=data.get("model"),
            user_id=data.get("user_id"),
            created_at=self._parse_timestamp(data.get("created_at")),
        )

    @staticmethod
    def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
        """Parse an ISO timestamp from the database, tolerating a Z suffix."""
        if not value:
            return None
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
