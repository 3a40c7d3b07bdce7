"""Tests for tiktoken-based token counting."""

import json
import pytest

from modules.budget.token_counter import (
    count_message_tokens,
    count_tokens,
    get_encoder,
    reset_encoder_cache,
    serialize_messages,
)
from providers.base import ChatMessage, MessageRole


@pytest.fixture(autouse=True)
def clear_encoders():
    reset_encoder_cache()
    yield
    reset_encoder_cache()


class TestGetEncoder:
    def test_gpt_4o_family_uses_o200k(self):
        assert get_encoder("gpt-4o-mini").name == "o200k_base"
        assert get_encoder("gpt-4o").name == "o200k_base"

    def test_older_models_use_cl100k(self):
        assert get_encoder("gpt-4").name == "cl100k_base"
        assert get_encoder("gpt-3.5-turbo").name == "cl100k_base"

    def test_unknown_model_uses_default(self):
        assert get_encoder("mystery-model").name == "cl100k_base"

    def test_encoders_are_cached(self):
        assert get_encoder("gpt-4") is get_encoder("gpt-4-turbo")


class TestCountTokens:
    def test_empty(self):
        assert count_tokens("") == 0

    def test_non_empty(self):
        assert count_tokens("Pineapple belongs on pizza.") > 0


class TestMessageTokens:
    def test_serialization_is_role_and_content(self):
        messages = [ChatMessage(role=MessageRole.USER, content="café")]
        assert json.loads(serialize_messages(messages)) == [{"role": "user", "content": "café"}]

    def test_counts_serialized_list(self):
        messages = [
            ChatMessage(role=MessageRole.SYSTEM, content="Be brief."),
            ChatMessage(role=MessageRole.USER, content="Cats or dogs?"),
        ]
        expected = count_tokens(serialize_messages(messages), "gpt-4o-mini")
        assert count_message_tokens(messages, "gpt-4o-mini") == expected

    def test_more_messages_more_tokens(self):
        one = [ChatMessage(role=MessageRole.USER, content="Cats or dogs?")]
        two = one + [ChatMessage(role=MessageRole.ASSISTANT, content="Dogs, obviously.")]
        assert count_message_tokens(two) > count_message_tokens(one)
