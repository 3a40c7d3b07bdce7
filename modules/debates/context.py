"""
Turn context assembly.

Loads everything a turn needs in one step: the debate, its stored turns,
the parsed request and the resolved caller. The loads are independent, so
they run concurrently.
"""

import asyncio
import logging
from typing import Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from modules.auth.exceptions import UserNotFoundError
from modules.auth.models import CallerIdentity

from .exceptions import InvalidTurnRequestError
from .interfaces import IDebateRepository
from .models import Debate, Turn, TurnRequest

logger = logging.getLogger(__name__)


class TurnContext(BaseModel):
    """Per-request aggregate handed to the conversation builder."""

    debate: Debate
    turns: list[Turn]
    request: TurnRequest
    caller: CallerIdentity
    user_id: str

    def has_turns(self) -> bool:
        return len(self.turns) > 0


def parse_turn_request(raw_body: bytes) -> TurnRequest:
    """
    Parse a raw JSON body into a TurnRequest.

    Raises:
        InvalidTurnRequestError: If the body is not a valid turn request
    """
    try:
        return TurnRequest.model_validate_json(raw_body or b"")
    except PydanticValidationError as e:
        raise InvalidTurnRequestError(
            "Invalid turn request",
            details={
                "errors": e.errors(
                    include_url=False, include_context=False, include_input=False
                )
            },
        )


class TurnContextAssembler:
    """Builds a TurnContext from storage and the request."""

    def __init__(self, repository: IDebateRepository):
        self._repository = repository

    async def assemble(
        self,
        debate_id: str,
        raw_body: bytes,
        caller: CallerIdentity,
    ) -> TurnContext:
        """
        Assemble the context for one turn.

        Args:
            debate_id: Debate UUID
            raw_body: JSON turn request body
            caller: Resolved caller identity

        Returns:
            TurnContext with turns ordered by order_number

        Raises:
            DebateNotFoundError: If the debate doesn't exist
            InvalidTurnRequestError: If the body is malformed
            UserNotFoundError: If neither the session nor the body names a user
        """
        debate, turns, request = await asyncio.gather(
            asyncio.to_thread(self._repository.get_debate, debate_id),
            asyncio.to_thread(self._repository.get_turns, debate_id),
            self._parse(raw_body),
        )

        user_id: Optional[str] = caller.resolve_user_id(request.user_id)
        if user_id is None:
            raise UserNotFoundError()

        logger.debug(
            f"Assembled context for debate {debate_id}: "
            f"{len(turns)} turns, speaker={request.speaker.value}"
        )
        return TurnContext(
            debate=debate,
            turns=sorted(turns, key=lambda turn: turn.order_number),
            request=request,
            caller=caller,
            user_id=user_id,
        )

    async def _parse(self, raw_body: bytes) -> TurnRequest:
        return parse_turn_request(raw_body)
