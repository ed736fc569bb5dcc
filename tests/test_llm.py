"""Unit tests for the llm module."""
from contextlib import asynccontextmanager
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from llmtui.llm import (
    AnthropicProvider,
    ChatMessage,
    LLMProvider,
    OpenAIProvider,
    Role,
    StreamingResponse,
    create_llm_provider,
)


class TestLLMProviderInterface:
    """Tests for the abstract LLMProvider interface."""

    def test_provider_is_abstract(self):
        """Test that LLMProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            LLMProvider()  # type: ignore

    async def test_context_manager_closes_provider(self, fake_provider):
        async with fake_provider as provider:
            assert provider is fake_provider
        assert fake_provider.closed


class TestChatMessage:
    """Tests for ChatMessage model."""

    def test_constructors_set_role(self):
        assert ChatMessage.user("hi").role == Role.USER
        assert ChatMessage.assistant("hello").role == Role.ASSISTANT
        assert ChatMessage.system("be brief").role == Role.SYSTEM

    def test_role_serializes_as_plain_string(self):
        message = ChatMessage.user("hi")
        assert message.model_dump() == {"role": "user", "content": "hi"}

    def test_message_is_immutable(self):
        message = ChatMessage.user("hi")
        with pytest.raises(ValidationError):
            message.content = "changed"  # type: ignore[misc]

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            ChatMessage(role="robot", content="beep")


class TestStreamingResponse:
    """Tests for StreamingResponse wrapper."""

    async def test_iterates_chunks_and_exposes_usage(self):
        async def chunks():
            yield "a"
            yield "b"

        stream = StreamingResponse(chunks())
        assert stream.usage is None
        collected = [chunk async for chunk in stream]
        stream.set_usage({"total_tokens": 2})

        assert collected == ["a", "b"]
        assert stream.usage == {"total_tokens": 2}


class TestFactory:
    """Tests for create_llm_provider."""

    def test_create_openai(self):
        provider = create_llm_provider("openai", api_key="fake-key", model="gpt-4o-mini")
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o-mini"

    def test_create_deepseek_uses_openai_compatible_client(self):
        provider = create_llm_provider("deepseek", api_key="fake-key")
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "deepseek-chat"

    def test_create_anthropic(self):
        provider = create_llm_provider("claude", api_key="fake-key")
        assert isinstance(provider, AnthropicProvider)

    def test_none_values_fall_back_to_defaults(self):
        provider = create_llm_provider("openai", api_key="fake-key", model=None, base_url=None)
        assert provider.model == "gpt-4o"

    def test_missing_api_key_raises_type_error(self):
        with pytest.raises(TypeError, match="api_key"):
            create_llm_provider("openai")

    def test_unknown_provider_raises_value_error(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_llm_provider("mystery", api_key="fake-key")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_openai_stream_real_api(api_keys):
    """Integration test: stream a short reply from the real API."""
    if not api_keys["openai"]:
        pytest.skip("OPENAI_API_KEY not set")

    provider = OpenAIProvider(api_key=api_keys["openai"], model="gpt-4o-mini")
    try:
        stream = await provider.chat_completion_stream(
            [ChatMessage.user("Reply with the single word: pong")],
            max_tokens=5,
        )
        text = "".join([chunk async for chunk in stream])
        assert text
        assert stream.usage is not None
    finally:
        await provider.close()


def _openai_chunk(content=None, usage=None):
    choices = [SimpleNamespace(delta=SimpleNamespace(content=content))] if content else []
    return SimpleNamespace(choices=choices, usage=usage)


class _ScriptedCompletions:
    """Stands in for ``client.chat.completions``; replies keyed by prompt."""

    def __init__(self, replies: dict[str, list]):
        self.replies = replies

    async def create(self, **params):
        chunks = self.replies[params["messages"][-1]["content"]]

        async def stream():
            for chunk in chunks:
                yield chunk

        return stream()


class _ScriptedMessages:
    """Stands in for ``client.messages``; replies keyed by prompt."""

    def __init__(self, replies: dict[str, list]):
        self.replies = replies

    @asynccontextmanager
    async def stream(self, **params):
        events = self.replies[params["messages"][-1]["content"]]

        async def iterate():
            for event in events:
                yield event

        yield iterate()


def _anthropic_events(text: str, input_tokens: int, output_tokens: int) -> list:
    return [
        SimpleNamespace(
            type="message_start",
            message=SimpleNamespace(usage=SimpleNamespace(input_tokens=input_tokens)),
        ),
        SimpleNamespace(type="content_block_delta", delta=SimpleNamespace(text=text)),
        SimpleNamespace(type="message_delta", usage=SimpleNamespace(output_tokens=output_tokens)),
    ]


class TestStreamUsage:
    """Usage belongs to the stream that produced it, even when streams overlap."""

    async def test_openai_overlapping_streams_keep_their_usage(self):
        provider = OpenAIProvider(api_key="fake-key")
        provider._client = SimpleNamespace(chat=SimpleNamespace(completions=_ScriptedCompletions({
            "first": [
                _openai_chunk("one"),
                _openai_chunk(usage=SimpleNamespace(
                    prompt_tokens=1, completion_tokens=1, total_tokens=2)),
            ],
            "second": [
                _openai_chunk("two"),
                _openai_chunk(usage=SimpleNamespace(
                    prompt_tokens=5, completion_tokens=5, total_tokens=10)),
            ],
        })))

        first = await provider.chat_completion_stream([ChatMessage.user("first")])
        second = await provider.chat_completion_stream([ChatMessage.user("second")])
        assert [chunk async for chunk in first] == ["one"]
        assert [chunk async for chunk in second] == ["two"]

        assert first.usage["total_tokens"] == 2
        assert second.usage["total_tokens"] == 10

    async def test_anthropic_overlapping_streams_keep_their_usage(self):
        provider = AnthropicProvider(api_key="fake-key")
        provider._client = SimpleNamespace(messages=_ScriptedMessages({
            "first": _anthropic_events("one", input_tokens=1, output_tokens=1),
            "second": _anthropic_events("two", input_tokens=5, output_tokens=5),
        }))

        first = await provider.chat_completion_stream([ChatMessage.user("first")])
        second = await provider.chat_completion_stream([ChatMessage.user("second")])
        assert [chunk async for chunk in second] == ["two"]
        assert [chunk async for chunk in first] == ["one"]

        assert first.usage == {"prompt_tokens": 1, "completion_tokens": 1, "total_tokens": 2}
        assert second.usage == {"prompt_tokens": 5, "completion_tokens": 5, "total_tokens": 10}
