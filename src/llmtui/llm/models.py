from collections.abc import AsyncIterator, Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Role of a chat message sender."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class StreamingResponse:
    """Wrapper for streaming LLM responses that captures usage info.

    Acts as an async iterator for incremental text chunks while storing token
    usage that becomes available at the end of the stream.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for chunk in stream:
            print(chunk, end="")
        print(stream.usage)  # {"prompt_tokens": 100, "completion_tokens": 50, ...}
    """

    def __init__(self, async_iter: AsyncIterator[str] | None = None):
        self._iter = async_iter
        self._usage: dict[str, Any] | None = None

    @classmethod
    def from_generator(
        cls,
        factory: Callable[["StreamingResponse"], AsyncIterator[str]],
    ) -> "StreamingResponse":
        """Build a response whose generator reports usage back to it.

        Args:
            factory: Called with the new response; returns the chunk iterator
        """
        response = cls()
        response._iter = factory(response)
        return response

    @property
    def usage(self) -> dict[str, Any] | None:
        """Get token usage info (available after iteration completes)."""
        return self._usage

    def set_usage(self, usage: dict[str, Any]) -> None:
        """Set token usage info (called by provider at end of stream)."""
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        return await self._iter.__anext__()


class ChatMessage(BaseModel):
    """A role-tagged chat message. Immutable once created."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: Role = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls(role=Role.ASSISTANT, content=content)

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role=Role.SYSTEM, content=content)


class LLMResponse(BaseModel):
    """Response from a batched (non-streaming) completion."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )
