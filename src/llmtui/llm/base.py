from abc import ABC, abstractmethod
from typing import Any

from .models import ChatMessage, LLMResponse, StreamingResponse


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    This module hides the design decision of which LLM provider to use.
    Implementations handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion
    - Usage accounting

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            response = await provider.chat_completion(messages)
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Default model identifier."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion in one batch.

        Args:
            messages: Ordered conversation history
            model: Model to use (None uses provider's default)
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            **kwargs: Provider-specific parameters

        Returns:
            LLMResponse containing generated content and metadata

        Raises:
            Exception: Provider-specific errors during generation
        """

    @abstractmethod
    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion.

        Returns:
            StreamingResponse yielding incremental text chunks. After
            iteration, usage is available via ``stream_response.usage``.

        Raises:
            Exception: Provider-specific errors, either when the request is
                opened or while iterating
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "LLMProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Suppresses "Event loop is closed" errors raised by httpx/anyio when
        the loop is torn down before the client.
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
