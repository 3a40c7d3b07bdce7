"""Tests for the turn conversation builder."""

import pytest

from modules.debates.conversation import (
    ROLE_BY_SPEAKER,
    build_turn_plan,
    derive_turn_case,
    invert_roles,
    role_for_speaker,
)
from modules.debates.exceptions import (
    InvalidSequenceError,
    InvalidTurnRequestError,
    MissingArgumentError,
)
from modules.debates.models import Speaker, TurnCase, TurnRequest
from providers.base import ChatMessage, MessageRole

from tests.conftest import make_debate, make_turns


SYSTEM = MessageRole.SYSTEM
USER = MessageRole.USER
ASSISTANT = MessageRole.ASSISTANT


def roles(messages: list[ChatMessage]) -> list[MessageRole]:
    return [message.role for message in messages]


class TestRoleMapping:
    def test_speaker_roles(self):
        """AI is the assistant; both human-side speakers are the user."""
        assert role_for_speaker("user") == USER
        assert role_for_speaker("AI") == ASSISTANT
        assert role_for_speaker("AI_for_user") == USER

    def test_every_speaker_is_mapped(self):
        assert set(ROLE_BY_SPEAKER) == set(Speaker)

    def test_unknown_speaker_rejected(self):
        with pytest.raises(InvalidTurnRequestError):
            role_for_speaker("moderator")


class TestInvertRoles:
    def test_swaps_user_and_assistant_only(self):
        messages = [
            ChatMessage(role=SYSTEM, content="rules"),
            ChatMessage(role=USER, content="a"),
            ChatMessage(role=ASSISTANT, content="b"),
        ]
        inverted = invert_roles(messages)
        assert roles(inverted) == [SYSTEM, ASSISTANT, USER]
        assert [m.content for m in inverted] == ["rules", "a", "b"]

    def test_inverting_twice_is_identity(self):
        messages = [
            ChatMessage(role=SYSTEM, content="rules"),
            ChatMessage(role=ASSISTANT, content="x"),
            ChatMessage(role=USER, content="y"),
            ChatMessage(role=ASSISTANT, content="z"),
        ]
        assert invert_roles(invert_roles(messages)) == messages

    def test_does_not_mutate_input(self):
        messages = [ChatMessage(role=USER, content="a")]
        invert_roles(messages)
        assert messages[0].role == USER


class TestDeriveTurnCase:
    @pytest.mark.parametrize(
        "has_turns,speaker,expected",
        [
            (False, Speaker.AI, TurnCase.AI_OPENS),
            (False, Speaker.USER, TurnCase.USER_OPENS),
            (True, Speaker.USER, TurnCase.USER_CONTINUES),
            (True, Speaker.AI, TurnCase.AI_CONTINUES),
            (True, Speaker.AI_FOR_USER, TurnCase.AI_FOR_USER),
            (False, Speaker.AI_FOR_USER, TurnCase.AI_FOR_USER),
        ],
    )
    def test_cases(self, has_turns, speaker, expected):
        assert derive_turn_case(has_turns, speaker) == expected


class TestAIOpens:
    def test_plan(self):
        debate = make_debate()
        plan = build_turn_plan(debate, [], TurnRequest(speaker="AI"))

        assert plan.case == TurnCase.AI_OPENS
        assert plan.speaker == Speaker.AI
        assert plan.order_number == 1
        assert plan.pending_user_turn is None
        assert roles(plan.messages) == [SYSTEM, USER, ASSISTANT]
        assert "Pineapple Pizza" in plan.messages[0].content
        assert "Socrates" in plan.messages[0].content
        assert plan.messages[1].content == "Socrates, you start the debate about Pineapple Pizza!"


class TestUserOpens:
    def test_plan(self):
        debate = make_debate()
        request = TurnRequest(speaker="user", argument="Fruit has no place on pizza.")
        plan = build_turn_plan(debate, [], request)

        assert plan.case == TurnCase.USER_OPENS
        assert plan.speaker == Speaker.AI
        assert plan.order_number == 2
        assert plan.pending_user_turn.content == "Fruit has no place on pizza."
        assert plan.pending_user_turn.order_number == 1
        assert roles(plan.messages) == [SYSTEM, USER, ASSISTANT]
        assert plan.messages[1].content == "Fruit has no place on pizza."

    @pytest.mark.parametrize("argument", [None, "", "   "])
    def test_missing_argument(self, argument):
        request = TurnRequest(speaker="user", argument=argument)
        with pytest.raises(MissingArgumentError):
            build_turn_plan(make_debate(), [], request)


class TestUserContinues:
    def test_plan(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.USER, Speaker.AI)
        request = TurnRequest(speaker="user", argument="Sweet and salty works.")
        plan = build_turn_plan(debate, turns, request)

        assert plan.case == TurnCase.USER_CONTINUES
        assert plan.order_number == 4
        assert plan.pending_user_turn.order_number == 3
        assert roles(plan.messages) == [SYSTEM, USER, ASSISTANT, USER, ASSISTANT]
        assert plan.messages[1].content == "user says 1"
        assert plan.messages[2].content == "AI says 2"
        assert plan.messages[3].content == "Sweet and salty works."

    def test_after_user_turn_is_out_of_sequence(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.AI, Speaker.USER)
        request = TurnRequest(speaker="user", argument="Again")

        with pytest.raises(InvalidSequenceError) as exc_info:
            build_turn_plan(debate, turns, request)
        assert exc_info.value.details["expected_role"] == "assistant"

    def test_after_ai_for_user_turn_is_out_of_sequence(self):
        """AI_for_user turns replay as user messages."""
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.AI, Speaker.AI_FOR_USER)
        request = TurnRequest(speaker="user", argument="Again")

        with pytest.raises(InvalidSequenceError):
            build_turn_plan(debate, turns, request)

    def test_missing_argument_checked_first(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.AI)
        with pytest.raises(MissingArgumentError):
            build_turn_plan(debate, turns, TurnRequest(speaker="user"))


class TestAIContinues:
    def test_plan(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.AI, Speaker.USER)
        plan = build_turn_plan(debate, turns, TurnRequest(speaker="AI"))

        assert plan.case == TurnCase.AI_CONTINUES
        assert plan.speaker == Speaker.AI
        assert plan.order_number == 3
        assert plan.pending_user_turn is None
        assert roles(plan.messages) == [SYSTEM, ASSISTANT, USER, ASSISTANT]

    def test_after_ai_turn_is_out_of_sequence(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.USER, Speaker.AI)

        with pytest.raises(InvalidSequenceError) as exc_info:
            build_turn_plan(debate, turns, TurnRequest(speaker="AI"))
        assert exc_info.value.details == {"expected_role": "user", "actual_role": "assistant"}

    def test_after_ai_for_user_turn(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.AI, Speaker.AI_FOR_USER)
        plan = build_turn_plan(debate, turns, TurnRequest(speaker="AI"))
        assert plan.order_number == 3


class TestAIForUser:
    def test_plan_inverts_roles(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.AI)
        plan = build_turn_plan(debate, turns, TurnRequest(speaker="AI_for_user"))

        assert plan.case == TurnCase.AI_FOR_USER
        assert plan.speaker == Speaker.AI_FOR_USER
        assert plan.order_number == 2
        assert plan.pending_user_turn is None
        # The persona's opening becomes the "user" the model answers
        assert roles(plan.messages) == [SYSTEM, USER, ASSISTANT]
        assert plan.messages[1].content == "AI says 1"

    def test_system_prompt_targets_persona(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.AI)
        plan = build_turn_plan(debate, turns, TurnRequest(speaker="AI_for_user"))

        assert "debating against 'Socrates'" in plan.messages[0].content
        assert "adopting the debating style" not in plan.messages[0].content

    def test_longer_history(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.USER, Speaker.AI, Speaker.AI_FOR_USER, Speaker.AI)
        plan = build_turn_plan(debate, turns, TurnRequest(speaker="AI_for_user"))

        assert roles(plan.messages) == [SYSTEM, ASSISTANT, USER, ASSISTANT, USER, ASSISTANT]
        assert plan.order_number == 5

    def test_without_turns_is_out_of_sequence(self):
        with pytest.raises(InvalidSequenceError) as exc_info:
            build_turn_plan(make_debate(), [], TurnRequest(speaker="AI_for_user"))
        assert exc_info.value.details["actual_role"] == "system"

    def test_after_user_turn_is_out_of_sequence(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.USER)
        with pytest.raises(InvalidSequenceError):
            build_turn_plan(debate, turns, TurnRequest(speaker="AI_for_user"))


class TestPlanShape:
    @pytest.mark.parametrize(
        "speakers,request_kwargs",
        [
            ((), {"speaker": "AI"}),
            ((), {"speaker": "user", "argument": "x"}),
            ((Speaker.AI,), {"speaker": "user", "argument": "x"}),
            ((Speaker.USER,), {"speaker": "AI"}),
            ((Speaker.AI,), {"speaker": "AI_for_user"}),
        ],
    )
    def test_system_first_and_primer_last(self, speakers, request_kwargs):
        """Every plan opens with the system preamble and ends on an assistant primer."""
        debate = make_debate()
        turns = make_turns(debate.id, *speakers)
        plan = build_turn_plan(debate, turns, TurnRequest(**request_kwargs))

        assert plan.messages[0].role == SYSTEM
        assert sum(1 for m in plan.messages if m.role == SYSTEM) == 1
        assert plan.messages[-1].role == ASSISTANT

    def test_does_not_touch_stored_turns(self):
        debate = make_debate()
        turns = make_turns(debate.id, Speaker.AI)
        before = [turn.model_dump() for turn in turns]
        build_turn_plan(debate, turns, TurnRequest(speaker="AI_for_user"))
        assert [turn.model_dump() for turn in turns] == before
