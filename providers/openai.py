"""OpenAI chat provider implementation.

Talks to OpenAI through the langchain-openai package. Requests can be routed
through the Helicone proxy, which adds per-debate attribution headers and
runs OpenAI moderation on every prompt.
"""

import logging
from typing import AsyncIterator, Optional

import openai
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, Field

from .base import ChatMessage, LLMProvider, MessageRole, ModelConfig
from .exceptions import ProviderRejectedError, ProviderUnavailableError

logger = logging.getLogger(__name__)

PROVIDER_NAME = "openai"


class DebateTitle(BaseModel):
    """Generate a short debate name based on a topic."""

    topic: str = Field(
        ...,
        description="The debate topic. Try to keep it around 3 words. Remove unnecessary words.",
    )


def to_langchain_messages(messages: list[ChatMessage]) -> list[BaseMessage]:
    """Convert chat messages to LangChain message objects."""
    converted: list[BaseMessage] = []
    for message in messages:
        if message.role == MessageRole.SYSTEM:
            converted.append(SystemMessage(content=message.content))
        elif message.role == MessageRole.ASSISTANT:
            converted.append(AIMessage(content=message.content))
        else:
            converted.append(HumanMessage(content=message.content))
    return converted


def translate_provider_error(error: openai.OpenAIError) -> Exception:
    """Map an OpenAI client error onto the provider error types."""
    detail = str(error)

    if isinstance(error, openai.RateLimitError):
        return ProviderRejectedError(
            PROVIDER_NAME, "Rate limit exceeded", rate_limited=True, original_error=detail
        )
    if isinstance(error, openai.BadRequestError):
        return ProviderRejectedError(
            PROVIDER_NAME, "Request failed, flagged by moderations", original_error=detail
        )
    if isinstance(error, openai.APITimeoutError):
        return ProviderUnavailableError(PROVIDER_NAME, "Request timed out", original_error=detail)
    if isinstance(error, openai.APIConnectionError):
        return ProviderUnavailableError(PROVIDER_NAME, "Connection failed", original_error=detail)
    if isinstance(error, openai.APIStatusError) and error.status_code < 500:
        # Auth and permission failures are server misconfiguration, not caller error
        return ProviderUnavailableError(
            PROVIDER_NAME, f"Provider returned {error.status_code}", original_error=detail
        )
    return ProviderUnavailableError(
        PROVIDER_NAME, "Server error - please try again", original_error=detail
    )


class OpenAIProvider(LLMProvider):
    """Provider for OpenAI GPT models.

    Args:
        api_key: OpenAI API key
        helicone_api_key: Optional Helicone key. When set, requests carry
            Helicone auth, attribution and moderation headers.
        helicone_base_url: Proxy endpoint used together with helicone_api_key
        timeout: Per-request timeout in seconds
    """

    name = PROVIDER_NAME

    def __init__(
        self,
        api_key: str = "",
        helicone_api_key: str = "",
        helicone_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._api_key = api_key
        self._helicone_api_key = helicone_api_key
        self._helicone_base_url = helicone_base_url or "https://oai.helicone.ai/v1"
        self._timeout = timeout

    def build_config(
        self,
        model_id: str,
        max_tokens: Optional[int] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> ModelConfig:
        """Build the per-call model config, including proxy headers."""
        headers: dict[str, str] = {}
        api_base = ""

        if self._helicone_api_key:
            api_base = self._helicone_base_url
            headers["Helicone-Auth"] = f"Bearer {self._helicone_api_key}"
            headers["Helicone-Moderations-Enabled"] = "true"
            metadata = metadata or {}
            if metadata.get("debate_id"):
                headers["Helicone-Property-DebateId"] = metadata["debate_id"]
            if metadata.get("user_id"):
                headers["Helicone-User-Id"] = metadata["user_id"]

        return ModelConfig(
            model_id=model_id,
            api_key=self._api_key,
            api_base=api_base,
            default_headers=headers,
            max_tokens=max_tokens,
            timeout=self._timeout,
        )

    def get_llm(self, config: ModelConfig, streaming: bool = False) -> ChatOpenAI:
        """Return a ChatOpenAI client configured for the given call.

        Raises:
            ValueError: If api_key is not provided
        """
        if not config.api_key:
            raise ValueError(
                "OpenAI API key is required. "
                "Set it via the OPENAI_API_KEY environment variable."
            )

        kwargs: dict = {
            "model": config.model_id,
            "api_key": config.api_key,
            "streaming": streaming,
        }
        if config.api_base:
            kwargs["base_url"] = config.api_base
        if config.default_headers:
            kwargs["default_headers"] = config.default_headers
        if config.max_tokens is not None:
            kwargs["max_tokens"] = config.max_tokens
        if config.timeout is not None:
            kwargs["timeout"] = config.timeout

        return ChatOpenAI(**kwargs)

    async def stream_completion(
        self,
        model_id: str,
        messages: list[ChatMessage],
        max_tokens: int,
        metadata: Optional[dict[str, str]] = None,
    ) -> AsyncIterator[str]:
        """Stream completion text from OpenAI, skipping empty deltas."""
        config = self.build_config(model_id, max_tokens=max_tokens, metadata=metadata)
        llm = self.get_llm(config, streaming=True)

        logger.debug(f"Streaming {model_id} with max_tokens={max_tokens}")
        try:
            async for chunk in llm.astream(to_langchain_messages(messages)):
                content = chunk.content
                if isinstance(content, str) and content:
                    yield content
        except openai.OpenAIError as e:
            raise translate_provider_error(e) from e

    async def generate_title(
        self,
        model_id: str,
        topic: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        """Ask the model for a short debate name via structured output."""
        config = self.build_config(model_id, max_tokens=100, metadata=metadata)
        structured = self.get_llm(config).with_structured_output(DebateTitle)

        prompt = HumanMessage(
            content=f'Please provide a short debate name for the topic: """{topic}"""'
        )
        try:
            result = await structured.ainvoke([prompt])
        except openai.OpenAIError as e:
            raise translate_provider_error(e) from e

        return result.topic
