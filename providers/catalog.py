"""Catalog of the chat models the service knows how to budget for.

Every model a turn can run on must be listed here: the token budget needs its
context window and completion cap, and entitlements need its tier.
"""

from typing import Optional

from pydantic import BaseModel


class ModelSpec(BaseModel):
    """Static facts about a chat model.

    Attributes:
        model_id: Provider model identifier
        context_window: Total tokens (prompt + completion) the model accepts
        max_completion_tokens: Largest completion the model will produce
        free_tier: Whether any caller may use the model
        encoding: tiktoken encoding used to count prompt tokens
    """

    model_config = {"frozen": True}

    model_id: str
    context_window: int
    max_completion_tokens: int
    free_tier: bool
    encoding: str = "cl100k_base"


MODEL_CATALOG: dict[str, ModelSpec] = {
    spec.model_id: spec
    for spec in [
        ModelSpec(
            model_id="gpt-4o-mini",
            context_window=128_000,
            max_completion_tokens=16_384,
            free_tier=True,
            encoding="o200k_base",
        ),
        ModelSpec(
            model_id="gpt-3.5-turbo",
            context_window=16_385,
            max_completion_tokens=4_096,
            free_tier=True,
        ),
        ModelSpec(
            model_id="gpt-3.5-turbo-0125",
            context_window=16_385,
            max_completion_tokens=4_096,
            free_tier=True,
        ),
        ModelSpec(
            model_id="gpt-4o",
            context_window=128_000,
            max_completion_tokens=16_384,
            free_tier=False,
            encoding="o200k_base",
        ),
        ModelSpec(
            model_id="gpt-4-turbo",
            context_window=128_000,
            max_completion_tokens=4_096,
            free_tier=False,
        ),
        ModelSpec(
            model_id="gpt-4",
            context_window=8_192,
            max_completion_tokens=8_192,
            free_tier=False,
        ),
    ]
}


def get_model_spec(model_id: Optional[str]) -> Optional[ModelSpec]:
    """Look up a model by identifier. Returns None for unknown models."""
    if not model_id:
        return None
    return MODEL_CATALOG.get(model_id)


def is_recognized_model(model_id: Optional[str]) -> bool:
    """Whether the identifier names a catalogued model."""
    return get_model_spec(model_id) is not None
