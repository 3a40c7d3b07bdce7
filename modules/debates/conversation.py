"""
Conversation builder for debate turns.

Turns a debate, its stored turns and a turn request into a TurnPlan: the
message list for the model, the speaker and slot of the generated turn, and
the user turn that must be stored first (if any).

Exactly one of five cases applies to a request:

    turns  speaker       case             generated  slot
    -----  ------------  ---------------  ---------  ----------
    none   AI            AI_OPENS         AI         1
    none   user          USER_OPENS       AI         2 (user 1)
    some   user          USER_CONTINUES   AI         n+2 (user n+1)
    some   AI            AI_CONTINUES     AI         n+1
    any    AI_for_user   AI_FOR_USER      AI_for_user n+1
"""

import logging
from typing import Callable, Optional

from providers.base import ChatMessage, MessageRole

from . import prompts
from .exceptions import (
    InvalidSequenceError,
    InvalidTurnRequestError,
    MissingArgumentError,
)
from .models import (
    Debate,
    PendingTurn,
    Speaker,
    Turn,
    TurnCase,
    TurnPlan,
    TurnRequest,
)

logger = logging.getLogger(__name__)


# AI_for_user turns argue the human's side, so they replay as user messages
ROLE_BY_SPEAKER: dict[Speaker, MessageRole] = {
    Speaker.USER: MessageRole.USER,
    Speaker.AI: MessageRole.ASSISTANT,
    Speaker.AI_FOR_USER: MessageRole.USER,
}

_INVERTED_ROLE: dict[MessageRole, MessageRole] = {
    MessageRole.USER: MessageRole.ASSISTANT,
    MessageRole.ASSISTANT: MessageRole.USER,
    MessageRole.SYSTEM: MessageRole.SYSTEM,
}


def role_for_speaker(speaker: str) -> MessageRole:
    """
    Map a stored speaker to the role it takes in the conversation.

    Raises:
        InvalidTurnRequestError: If the speaker is not recognised
    """
    try:
        return ROLE_BY_SPEAKER[Speaker(speaker)]
    except ValueError:
        raise InvalidTurnRequestError(
            f"Unknown speaker: {speaker!r}",
            details={"speaker": str(speaker)},
        )


def replay_turns(turns: list[Turn]) -> list[ChatMessage]:
    """Render stored turns as chat messages, in order."""
    return [
        ChatMessage(role=role_for_speaker(turn.speaker), content=turn.content)
        for turn in turns
    ]


def invert_roles(messages: list[ChatMessage]) -> list[ChatMessage]:
    """Swap user and assistant roles. System messages are left alone."""
    return [
        ChatMessage(role=_INVERTED_ROLE[message.role], content=message.content)
        for message in messages
    ]


def derive_turn_case(has_turns: bool, speaker: Speaker) -> TurnCase:
    """
    Pick the case for a request.

    Raises:
        InvalidTurnRequestError: If no case applies
    """
    if speaker == Speaker.AI_FOR_USER:
        return TurnCase.AI_FOR_USER
    if speaker == Speaker.AI:
        return TurnCase.AI_CONTINUES if has_turns else TurnCase.AI_OPENS
    if speaker == Speaker.USER:
        return TurnCase.USER_CONTINUES if has_turns else TurnCase.USER_OPENS
    raise InvalidTurnRequestError()


def _require_argument(request: TurnRequest) -> str:
    if request.argument is None or not request.argument.strip():
        raise MissingArgumentError()
    return request.argument


def _require_last_role(messages: list[ChatMessage], expected: MessageRole) -> None:
    actual = messages[-1].role
    if actual != expected:
        raise InvalidSequenceError(expected.value, actual.value)


def _system_message(debate: Debate) -> ChatMessage:
    return ChatMessage(
        role=MessageRole.SYSTEM,
        content=prompts.persona_system_prompt(debate.short_topic, debate.persona),
    )


# =============================================================================
# Case builders
# =============================================================================


def _build_ai_opens(debate: Debate, turns: list[Turn], request: TurnRequest) -> TurnPlan:
    messages = [
        _system_message(debate),
        ChatMessage(
            role=MessageRole.USER,
            content=prompts.ai_opens_request(debate.short_topic, debate.persona),
        ),
        ChatMessage(
            role=MessageRole.ASSISTANT,
            content=prompts.ai_opens_primer(debate.short_topic, debate.persona),
        ),
    ]
    return TurnPlan(
        case=TurnCase.AI_OPENS,
        messages=messages,
        speaker=Speaker.AI,
        order_number=1,
    )


def _build_user_turn(
    case: TurnCase,
    debate: Debate,
    turns: list[Turn],
    request: TurnRequest,
) -> TurnPlan:
    argument = _require_argument(request)
    messages = [_system_message(debate), *replay_turns(turns)]
    if turns:
        _require_last_role(messages, MessageRole.ASSISTANT)

    messages.append(ChatMessage(role=MessageRole.USER, content=argument))
    messages.append(
        ChatMessage(
            role=MessageRole.ASSISTANT,
            content=prompts.reply_to_argument_primer(debate.short_topic, debate.persona),
        )
    )
    return TurnPlan(
        case=case,
        messages=messages,
        speaker=Speaker.AI,
        order_number=len(turns) + 2,
        pending_user_turn=PendingTurn(content=argument, order_number=len(turns) + 1),
    )


def _build_user_opens(debate: Debate, turns: list[Turn], request: TurnRequest) -> TurnPlan:
    return _build_user_turn(TurnCase.USER_OPENS, debate, turns, request)


def _build_user_continues(debate: Debate, turns: list[Turn], request: TurnRequest) -> TurnPlan:
    return _build_user_turn(TurnCase.USER_CONTINUES, debate, turns, request)


def _build_ai_continues(debate: Debate, turns: list[Turn], request: TurnRequest) -> TurnPlan:
    messages = [_system_message(debate), *replay_turns(turns)]
    _require_last_role(messages, MessageRole.USER)

    messages.append(
        ChatMessage(
            role=MessageRole.ASSISTANT,
            content=prompts.counter_argument_primer(debate.short_topic, debate.persona),
        )
    )
    return TurnPlan(
        case=TurnCase.AI_CONTINUES,
        messages=messages,
        speaker=Speaker.AI,
        order_number=len(turns) + 1,
    )


def _build_ai_for_user(debate: Debate, turns: list[Turn], request: TurnRequest) -> TurnPlan:
    messages = [_system_message(debate), *replay_turns(turns)]
    _require_last_role(messages, MessageRole.ASSISTANT)

    # The model now speaks for the human, so the persona becomes its opponent
    inverted = invert_roles(messages)
    inverted[0] = ChatMessage(
        role=MessageRole.SYSTEM,
        content=prompts.against_persona_system_prompt(debate.short_topic, debate.persona),
    )
    inverted.append(
        ChatMessage(
            role=MessageRole.ASSISTANT,
            content=prompts.counter_persona_primer(debate.short_topic),
        )
    )
    return TurnPlan(
        case=TurnCase.AI_FOR_USER,
        messages=inverted,
        speaker=Speaker.AI_FOR_USER,
        order_number=len(turns) + 1,
    )


_BUILDERS: dict[TurnCase, Callable[[Debate, list[Turn], TurnRequest], TurnPlan]] = {
    TurnCase.AI_OPENS: _build_ai_opens,
    TurnCase.USER_OPENS: _build_user_opens,
    TurnCase.USER_CONTINUES: _build_user_continues,
    TurnCase.AI_CONTINUES: _build_ai_continues,
    TurnCase.AI_FOR_USER: _build_ai_for_user,
}


def build_turn_plan(
    debate: Debate,
    turns: list[Turn],
    request: TurnRequest,
    case: Optional[TurnCase] = None,
) -> TurnPlan:
    """
    Build the plan for one turn.

    Args:
        debate: The debate being played
        turns: Stored turns, ordered by order_number
        request: The parsed turn request
        case: Precomputed case, derived from turns and request when omitted

    Returns:
        TurnPlan for the request

    Raises:
        MissingArgumentError: If the user speaks without an argument
        InvalidSequenceError: If the speaker cannot follow the last turn
        InvalidTurnRequestError: If no case applies
    """
    if case is None:
        case = derive_turn_case(bool(turns), request.speaker)
    plan = _BUILDERS[case](debate, turns, request)
    logger.debug(
        f"Built {case.value} plan for debate {debate.id}: "
        f"{len(plan.messages)} messages, slot {plan.order_number}"
    )
    return plan
