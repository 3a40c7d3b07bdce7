"""LLM provider implementations."""

from .base import ChatMessage, LLMProvider, MessageRole, ModelConfig
from .catalog import MODEL_CATALOG, ModelSpec, get_model_spec, is_recognized_model
from .exceptions import ProviderRejectedError, ProviderUnavailableError
from .factory import get_model_provider, reset_model_provider

__all__ = [
    "ChatMessage",
    "LLMProvider",
    "MessageRole",
    "ModelConfig",
    "MODEL_CATALOG",
    "ModelSpec",
    "get_model_spec",
    "is_recognized_model",
    "ProviderRejectedError",
    "ProviderUnavailableError",
    "get_model_provider",
    "reset_model_provider",
]
