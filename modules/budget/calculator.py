"""
Completion token budget.

Works out how many completion tokens a turn may request from the prompt size
and the model's limits, and refuses turns that would leave too little room.
"""

import logging
from typing import Callable

from providers.base import ChatMessage
from providers.catalog import ModelSpec

from .exceptions import InsufficientBudgetError
from .token_counter import count_message_tokens

logger = logging.getLogger(__name__)

DEFAULT_MIN_COMPLETION_TOKENS = 50

MessageTokenCounter = Callable[[list[ChatMessage], str], int]


class TokenBudgetCalculator:
    """
    Computes max_tokens for a completion request.

    Args:
        min_completion_tokens: Floor below which a turn is refused
        counter: Prompt token counter, (messages, model_id) -> tokens.
            Defaults to the tiktoken-based count_message_tokens.
    """

    def __init__(
        self,
        min_completion_tokens: int = DEFAULT_MIN_COMPLETION_TOKENS,
        counter: MessageTokenCounter = count_message_tokens,
    ):
        self._min_completion_tokens = min_completion_tokens
        self._counter = counter

    def budget(self, messages: list[ChatMessage], model: ModelSpec) -> int:
        """
        Return the completion token cap for this prompt.

        The cap is min(context_window - prompt_tokens, model completion cap).

        Raises:
            InsufficientBudgetError: If the cap is below the floor
        """
        prompt_tokens = self._counter(messages, model.model_id)
        available = min(
            model.context_window - prompt_tokens,
            model.max_completion_tokens,
        )

        if available < self._min_completion_tokens:
            raise InsufficientBudgetError(
                model=model.model_id,
                prompt_tokens=prompt_tokens,
                available_tokens=available,
                minimum_tokens=self._min_completion_tokens,
            )

        logger.debug(
            f"Budget for {model.model_id}: prompt={prompt_tokens}, max_tokens={available}"
        )
        return available
