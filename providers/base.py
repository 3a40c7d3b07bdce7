"""Base classes and models for LLM providers."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import AsyncIterator, Optional

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Model-facing chat roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single chat message as sent to the model."""

    model_config = {"frozen": True}

    role: MessageRole
    content: str


class ModelConfig(BaseModel):
    """Configuration for one model call.

    Attributes:
        model_id: Model identifier (e.g., "gpt-4o-mini")
        api_key: API key for the provider
        api_base: Base URL override (e.g., an observability proxy)
        default_headers: Extra HTTP headers sent with every request
        max_tokens: Completion token cap for this call
        timeout: Per-request timeout in seconds
    """

    model_config = {"frozen": True}

    model_id: str
    api_key: str = ""
    api_base: str = ""
    default_headers: dict[str, str] = Field(default_factory=dict)
    max_tokens: Optional[int] = None
    timeout: Optional[float] = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    A provider is a black box that streams completion text and can produce
    a short structured title. Failures are raised as ProviderRejectedError
    or ProviderUnavailableError, never as client-library exceptions.
    """

    name: str = "llm"

    @abstractmethod
    def stream_completion(
        self,
        model_id: str,
        messages: list[ChatMessage],
        max_tokens: int,
        metadata: Optional[dict[str, str]] = None,
    ) -> AsyncIterator[str]:
        """Stream completion text fragments for the given conversation.

        Args:
            model_id: Model to call
            messages: Conversation, system preamble first
            max_tokens: Completion token cap
            metadata: Request attribution (debate_id, user_id)

        Returns:
            Async iterator of non-empty text fragments
        """
        pass

    @abstractmethod
    async def generate_title(
        self,
        model_id: str,
        topic: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        """Return a short (about three word) title for a debate topic."""
        pass
