"""Anthropic Claude LLM provider implementation.

Uses the official Anthropic Python SDK for async chat completions.
Reference: https://github.com/anthropics/anthropic-sdk-python
"""

from collections.abc import AsyncIterator
from typing import Any

from anthropic import AsyncAnthropic

from ..base import LLMProvider
from ..models import ChatMessage, LLMResponse, Role, StreamingResponse

DEFAULT_MAX_TOKENS = 4096  # Anthropic requires max_tokens


def _split_system(messages: list[ChatMessage]) -> tuple[str | None, list[dict[str, str]]]:
    """Pull the system prompt out of the history; Anthropic takes it separately."""
    system_message = None
    anthropic_messages = []
    for msg in messages:
        if msg.role == Role.SYSTEM:
            system_message = msg.content
        else:
            anthropic_messages.append({"role": msg.role, "content": msg.content})
    return system_message, anthropic_messages


class AnthropicProvider(LLMProvider):
    """Anthropic Claude LLM provider implementation.

    Hidden design decisions:
    - Anthropic API client initialization
    - Message format conversion (system message handling)
    - Usage capture from message_start / message_delta events
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._client = AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            **client_kwargs
        )

    @property
    def model(self) -> str:
        return self._model

    def _request_params(
        self,
        messages: list[ChatMessage],
        model: str | None,
        temperature: float,
        max_tokens: int | None,
        **kwargs: Any
    ) -> dict[str, Any]:
        system_message, anthropic_messages = _split_system(messages)
        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": anthropic_messages,
            "temperature": temperature,
            "max_tokens": max_tokens or DEFAULT_MAX_TOKENS,
            **kwargs
        }
        if system_message:
            request_params["system"] = system_message
        return request_params

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        request_params = self._request_params(messages, model, temperature, max_tokens, **kwargs)
        response = await self._client.messages.create(**request_params)

        usage = None
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
                "total_tokens": response.usage.input_tokens + response.usage.output_tokens
            }

        content = "".join(
            block.text for block in response.content if hasattr(block, "text")
        )

        return LLMResponse(content=content, model=response.model, usage=usage)

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        request_params = self._request_params(messages, model, temperature, max_tokens, **kwargs)
        return StreamingResponse.from_generator(
            lambda response: self._stream_generator(request_params, response)
        )

    async def _stream_generator(
        self,
        request_params: dict[str, Any],
        response: StreamingResponse,
    ) -> AsyncIterator[str]:
        input_tokens = 0
        output_tokens = 0

        async with self._client.messages.stream(**request_params) as stream:
            async for event in stream:
                event_type = getattr(event, "type", None)
                if event_type == "message_start":
                    usage = getattr(event.message, "usage", None)
                    if usage is not None:
                        input_tokens = usage.input_tokens
                elif event_type == "message_delta":
                    usage = getattr(event, "usage", None)
                    if usage is not None:
                        # cumulative
                        output_tokens = usage.output_tokens
                elif event_type == "content_block_delta":
                    text = getattr(event.delta, "text", None)
                    if text:
                        yield text

        response.set_usage({
            "prompt_tokens": input_tokens,
            "completion_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
        })

    async def close(self) -> None:
        await self._client.close()
