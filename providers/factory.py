"""Factory functions for creating LLM providers."""

from typing import Optional

from shared.config import get_settings

from .base import LLMProvider
from .openai import OpenAIProvider

_provider_instance: Optional[LLMProvider] = None


def get_model_provider() -> LLMProvider:
    """Get the singleton chat provider configured from settings."""
    global _provider_instance
    if _provider_instance is None:
        settings = get_settings()
        _provider_instance = OpenAIProvider(
            api_key=settings.openai_api_key,
            helicone_api_key=settings.helicone_api_key,
            helicone_base_url=settings.helicone_base_url,
            timeout=settings.provider_timeout_seconds,
        )
    return _provider_instance


def reset_model_provider() -> None:
    """Reset the provider singleton (for testing)."""
    global _provider_instance
    _provider_instance = None
