"""
Debates module data models.

These models define the core data structures for the Riposte debate system.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from providers.base import ChatMessage


class Speaker(str, Enum):
    """Who produced a turn."""

    USER = "user"                # The human
    AI = "AI"                    # The AI debating in persona
    AI_FOR_USER = "AI_for_user"  # The AI arguing the human's side


class TurnCase(str, Enum):
    """The five ways a turn request can be handled."""

    AI_OPENS = "ai_opens"              # No turns yet, AI speaks first
    USER_OPENS = "user_opens"          # No turns yet, user speaks first
    USER_CONTINUES = "user_continues"  # User answers the AI
    AI_CONTINUES = "ai_continues"      # AI answers the user
    AI_FOR_USER = "ai_for_user"        # AI answers the AI on the user's behalf


class Debate(BaseModel):
    """A topic and persona scoped conversation that owns ordered turns."""

    id: str = Field(..., description="Debate ID (UUID)")
    topic: str = Field(..., description="Full debate topic")
    short_topic: str = Field(..., description="Short generated title")
    persona: str = Field(..., description="Debating character the AI adopts")
    model: str = Field(..., description="Model bound to the debate")
    user_id: Optional[str] = Field(None, description="Owner user ID")
    created_at: Optional[datetime] = Field(None, description="Creation time")


class NewDebate(BaseModel):
    """Insert payload for a debate."""

    topic: str
    short_topic: str
    persona: str
    model: str
    user_id: Optional[str] = None


class Turn(BaseModel):
    """One persisted contribution to a debate. Immutable once stored."""

    id: str = Field(..., description="Turn ID")
    debate_id: str = Field(..., description="Parent debate ID")
    speaker: Speaker = Field(..., description="Who produced the turn")
    content: str = Field(..., description="Full turn text")
    order_number: int = Field(..., ge=1, description="Position in the debate (1-indexed)")
    model: Optional[str] = Field(None, description="Model used for the turn")
    user_id: Optional[str] = Field(None, description="Human associated with the turn")
    created_at: Optional[datetime] = Field(None, description="When the turn was stored")

    model_config = {"frozen": True}


class NewTurn(BaseModel):
    """Insert payload for a turn."""

    debate_id: str
    speaker: Speaker
    content: str
    order_number: int = Field(..., ge=1)
    model: Optional[str] = None
    user_id: Optional[str] = None


class CreateDebateRequest(BaseModel):
    """Request to create a new debate."""

    topic: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="The topic to debate",
    )
    persona: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Debating style the AI should adopt",
    )
    user_id: Optional[str] = Field(
        None,
        alias="userId",
        description="Caller-chosen ID for anonymous callers",
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}


class TurnRequest(BaseModel):
    """
    Request to take a turn. Parsed from the raw request body.

    argument is only required when speaker is "user".
    """

    speaker: Speaker = Field(..., description="Who should speak")
    argument: Optional[str] = Field(None, description="The user's argument")
    model: Optional[str] = Field(None, description="Model override")
    user_id: Optional[str] = Field(
        None,
        alias="userId",
        description="Caller-chosen ID for anonymous callers",
    )
    heh: bool = Field(default=False, description="Skip entitlement checks (internal)")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class PendingTurn(BaseModel):
    """A user turn that must be stored before generation starts."""

    content: str
    order_number: int = Field(..., ge=1)


class TurnPlan(BaseModel):
    """
    What to send to the model for a turn, and where the result goes.

    order_number is the slot of the generated turn. pending_user_turn, when
    present, always takes the slot just before it.
    """

    case: TurnCase
    messages: list[ChatMessage]
    speaker: Speaker = Field(..., description="Speaker recorded for the generated turn")
    order_number: int = Field(..., ge=1)
    pending_user_turn: Optional[PendingTurn] = None
