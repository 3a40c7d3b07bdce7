"""
Token counting utilities.

Counts prompt tokens with tiktoken. The encoding comes from the model catalog
(o200k_base for the gpt-4o family, cl100k_base otherwise).
"""

import json
import tiktoken

from providers.base import ChatMessage
from providers.catalog import get_model_spec

DEFAULT_ENCODING = "cl100k_base"

# Cache encoders to avoid repeated initialization
_encoders: dict[str, tiktoken.Encoding] = {}


def get_encoder(model: str) -> tiktoken.Encoding:
    """
    Get the tokenizer for a model.

    Args:
        model: Model name (e.g., "gpt-4o-mini")

    Returns:
        tiktoken.Encoding instance
    """
    spec = get_model_spec(model)
    encoding_name = spec.encoding if spec else DEFAULT_ENCODING

    if encoding_name not in _encoders:
        _encoders[encoding_name] = tiktoken.get_encoding(encoding_name)

    return _encoders[encoding_name]


def count_tokens(text: str, model: str = "gpt-4o-mini") -> int:
    """
    Count tokens in a text string.

    Args:
        text: The text to count tokens for
        model: Model name for tokenizer selection

    Returns:
        Number of tokens
    """
    if not text:
        return 0

    encoder = get_encoder(model)
    return len(encoder.encode(text))


def serialize_messages(messages: list[ChatMessage]) -> str:
    """
    Serialize a message list to the JSON text that gets tokenized.

    Keys are emitted in a fixed order so the count is deterministic.
    """
    return json.dumps(
        [{"role": m.role.value, "content": m.content} for m in messages],
        ensure_ascii=False,
    )


def count_message_tokens(
    messages: list[ChatMessage],
    model: str = "gpt-4o-mini",
) -> int:
    """
    Count prompt tokens for a chat message list.

    Tokenizes the serialized list as a whole, which slightly overestimates
    the provider's own count and so errs on the safe side.
    """
    return count_tokens(serialize_messages(messages), model)


def reset_encoder_cache() -> None:
    """Reset the encoder cache (for testing)."""
    global _encoders
    _encoders = {}
