"""
Debates module exceptions.
"""

from typing import Any, Optional

from shared.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)


class DebateNotFoundError(NotFoundError):
    """Raised when a debate is not found."""

    def __init__(self, debate_id: str):
        super().__init__(
            f"Debate not found: {debate_id}",
            code="DEBATE_NOT_FOUND",
            details={"debate_id": debate_id},
        )


class InvalidTurnRequestError(ValidationError):
    """Raised when a turn request is malformed or names no valid case."""

    def __init__(
        self,
        message: str = "Invalid turn request",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            code="INVALID_TURN_REQUEST",
            details=details,
        )


class MissingArgumentError(InvalidTurnRequestError):
    """Raised when the user speaks without an argument."""

    def __init__(self):
        super().__init__("Argument not found")
        self.code = "MISSING_ARGUMENT"


class InvalidSequenceError(ConflictError):
    """Raised when the requested speaker cannot follow the last turn."""

    def __init__(self, expected_role: str, actual_role: str):
        super().__init__(
            f"Last message is not {expected_role}",
            code="INVALID_SEQUENCE",
            details={"expected_role": expected_role, "actual_role": actual_role},
        )


class UnknownSpeakerError(InvalidTurnRequestError):
    """Raised when a stored turn names a speaker outside the role map."""

    def __init__(self, speaker: str, debate_id: str, order_number: Optional[int] = None):
        super().__init__(
            f"Unknown speaker: {speaker}",
            details={
                "speaker": speaker,
                "debate_id": debate_id,
                "order_number": order_number,
            },
        )
        self.code = "UNKNOWN_SPEAKER"
