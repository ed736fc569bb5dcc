from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse, StreamingResponse

DEEPSEEK_BASE_URL = "https://api.deepseek.com"


def _to_openai_messages(messages: list[ChatMessage]) -> list[dict[str, str]]:
    return [{"role": msg.role, "content": msg.content} for msg in messages]


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions provider.

    Also serves OpenAI-compatible endpoints (DeepSeek, local gateways)
    through ``base_url``.

    Hidden design decisions:
    - OpenAI API client initialization
    - Message format conversion
    - Usage capture from the final stream chunk
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: API key for the endpoint
            model: Default model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": _to_openai_messages(messages),
            "temperature": temperature,
            **kwargs
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        completion = await self._client.chat.completions.create(**request_params)

        usage = None
        if completion.usage:
            usage = {
                "prompt_tokens": completion.usage.prompt_tokens,
                "completion_tokens": completion.usage.completion_tokens,
                "total_tokens": completion.usage.total_tokens
            }

        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=completion.model,
            usage=usage
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": _to_openai_messages(messages),
            "temperature": temperature,
            "stream": True,
            "stream_options": {"include_usage": True},
            **kwargs,
        }
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        return StreamingResponse.from_generator(
            lambda response: self._stream_generator(request_params, response)
        )

    async def _stream_generator(
        self,
        request_params: dict[str, Any],
        response: StreamingResponse,
    ) -> AsyncIterator[str]:
        """Yield content deltas and capture usage from the final chunk."""
        stream = await self._client.chat.completions.create(**request_params)

        async for chunk in stream:
            if chunk.usage is not None:
                response.set_usage({
                    "prompt_tokens": chunk.usage.prompt_tokens,
                    "completion_tokens": chunk.usage.completion_tokens,
                    "total_tokens": chunk.usage.total_tokens,
                })
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content

    async def close(self) -> None:
        await self._client.close()
