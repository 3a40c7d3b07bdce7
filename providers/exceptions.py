"""
Provider exceptions.

Client-library errors are translated into these two types so callers can
tell a refused request from an unreachable provider.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError


class ProviderRejectedError(ExternalServiceError):
    """The provider refused the request (moderation, rate limit, bad input)."""

    def __init__(
        self,
        provider: str,
        message: str,
        rate_limited: bool = False,
        original_error: Optional[str] = None,
    ):
        super().__init__(
            f"Provider rejected request ({provider}): {message}",
            service=provider,
            code="PROVIDER_RATE_LIMITED" if rate_limited else "PROVIDER_REJECTED",
            details={"original_error": original_error},
            retryable=rate_limited,
        )
        self.rate_limited = rate_limited


class ProviderUnavailableError(ExternalServiceError):
    """The provider could not be reached or did not answer in time."""

    def __init__(
        self,
        provider: str,
        message: str,
        original_error: Optional[str] = None,
    ):
        super().__init__(
            f"Provider unavailable ({provider}): {message}",
            service=provider,
            code="PROVIDER_UNAVAILABLE",
            details={"original_error": original_error},
            retryable=True,
        )
