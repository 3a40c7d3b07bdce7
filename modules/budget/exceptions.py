"""
Token budget exceptions.
"""

from shared.exceptions import ValidationError


class InsufficientBudgetError(ValidationError):
    """Raised when too few completion tokens remain for a useful reply."""

    def __init__(
        self,
        model: str,
        prompt_tokens: int,
        available_tokens: int,
        minimum_tokens: int,
    ):
        super().__init__(
            "Not enough tokens remaining for response",
            code="INSUFFICIENT_BUDGET",
            details={
                "model": model,
                "prompt_tokens": prompt_tokens,
                "available_tokens": available_tokens,
                "minimum_tokens": minimum_tokens,
            },
        )
