"""
Token budget module.

Counts prompt tokens and derives the completion budget for a turn.

Public API:
- TokenBudgetCalculator: Computes max_tokens or refuses the turn
- InsufficientBudgetError: Raised when the budget is below the floor
- count_tokens / count_message_tokens: tiktoken-based counting
"""

from .calculator import TokenBudgetCalculator, DEFAULT_MIN_COMPLETION_TOKENS
from .exceptions import InsufficientBudgetError
from .token_counter import (
    count_tokens,
    count_message_tokens,
    serialize_messages,
)

__all__ = [
    "TokenBudgetCalculator",
    "DEFAULT_MIN_COMPLETION_TOKENS",
    "InsufficientBudgetError",
    "count_tokens",
    "count_message_tokens",
    "serialize_messages",
]
