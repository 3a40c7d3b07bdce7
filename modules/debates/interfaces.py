"""
Debates module interface.

This is the core business logic interface for Riposte.
The API layer depends on IDebateService for all debate operations, and the
service depends on IDebateRepository for storage.
"""

from typing import Protocol, TYPE_CHECKING, runtime_checkable

from modules.auth.models import CallerIdentity

from .models import (
    CreateDebateRequest,
    Debate,
    NewDebate,
    NewTurn,
    Turn,
)

if TYPE_CHECKING:
    from .service import TurnStream


@runtime_checkable
class IDebateRepository(Protocol):
    """
    Interface for debate storage.

    All methods are synchronous; async callers run them in worker threads.
    """

    def get_debate(self, debate_id: str) -> Debate:
        """
        Get a debate by ID.

        Raises:
            DebateNotFoundError: If the debate doesn't exist
        """
        ...

    def get_turns(self, debate_id: str) -> list[Turn]:
        """Get all turns of a debate ordered by order_number ascending."""
        ...

    def insert_turn(self, turn: NewTurn) -> Turn:
        """Store a new turn and return it with its generated ID."""
        ...

    def create_debate(self, debate: NewDebate) -> Debate:
        """Store a new debate and return it with its generated ID."""
        ...


@runtime_checkable
class IDebateService(Protocol):
    """
    Interface for debate operations.

    This protocol defines the contract that the debates module exposes
    to the API layer.
    """

    async def create_debate(
        self,
        request: CreateDebateRequest,
        caller: CallerIdentity,
    ) -> Debate:
        """
        Create a new debate with a generated short title.

        Args:
            request: Topic, persona and optional anonymous user ID
            caller: Who is creating the debate

        Returns:
            The created debate

        Raises:
            UserNotFoundError: If no user ID can be resolved
            ProviderRejectedError: If the title request was refused
            ProviderUnavailableError: If the provider could not be reached
        """
        ...

    async def take_turn(
        self,
        debate_id: str,
        raw_body: bytes,
        caller: CallerIdentity,
    ) -> "TurnStream":
        """
        Take one turn and start streaming the generated reply.

        Every validation, entitlement and budget check happens before the
        model is called. Provider errors that occur before the first
        fragment are raised here. Later errors end the stream early.

        Args:
            debate_id: Debate UUID
            raw_body: JSON turn request body
            caller: Who is taking the turn

        Returns:
            TurnStream with the model used and the byte stream relay

        Raises:
            DebateNotFoundError: If the debate doesn't exist
            UserNotFoundError: If no user ID can be resolved
            InvalidTurnRequestError: If the body or the case is invalid
            InvalidSequenceError: If the speaker cannot follow the last turn
            UnauthorizedModelError, PlanRequiredError: If the model is not permitted
            InsufficientBudgetError: If the prompt leaves too few tokens
            ProviderRejectedError, ProviderUnavailableError: On provider failure
        """
        ...
