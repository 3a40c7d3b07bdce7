"""
Debates module.

Handles debate creation, turn planning, and streamed turn generation.

Public API:
- IDebateService: Interface for debate operations
- IDebateRepository: Interface for debate storage
- Debate, Turn: Stored debate data
- TurnRequest, CreateDebateRequest: Request bodies
- build_turn_plan: Pure conversation builder
"""

from .interfaces import IDebateRepository, IDebateService
from .models import (
    CreateDebateRequest,
    Debate,
    NewDebate,
    NewTurn,
    PendingTurn,
    Speaker,
    Turn,
    TurnCase,
    TurnPlan,
    TurnRequest,
)
from .conversation import (
    build_turn_plan,
    derive_turn_case,
    invert_roles,
    role_for_speaker,
)
from .exceptions import (
    DebateNotFoundError,
    InvalidSequenceError,
    InvalidTurnRequestError,
    MissingArgumentError,
    UnknownSpeakerError,
)

__all__ = [
    # Interfaces
    "IDebateRepository",
    "IDebateService",
    # Models
    "CreateDebateRequest",
    "Debate",
    "NewDebate",
    "NewTurn",
    "PendingTurn",
    "Speaker",
    "Turn",
    "TurnCase",
    "TurnPlan",
    "TurnRequest",
    # Conversation
    "build_turn_plan",
    "derive_turn_case",
    "invert_roles",
    "role_for_speaker",
    # Exceptions
    "DebateNotFoundError",
    "InvalidSequenceError",
    "InvalidTurnRequestError",
    "MissingArgumentError",
    "UnknownSpeakerError",
]
