"""Pytest configuration and shared fixtures."""
import asyncio
import os
from collections.abc import AsyncIterator
from typing import Any

import pytest

from llmtui.chat import ChatSession, CompletionGateway, StreamRelay
from llmtui.llm import ChatMessage, LLMProvider, LLMResponse, StreamingResponse


class FakeProvider(LLMProvider):
    """Scripted provider: yields ``chunks`` (incremental), then optionally fails.

    With a ``gate``, streaming waits until the event is set.
    """

    def __init__(
        self,
        chunks: list[str] | tuple[str, ...] = (),
        error: Exception | None = None,
        open_error: Exception | None = None,
        delay: float = 0.0,
        gate: asyncio.Event | None = None,
        model: str = "fake-model",
    ) -> None:
        self.chunks = list(chunks)
        self.error = error
        self.open_error = open_error
        self.delay = delay
        self.gate = gate
        self._model = model
        self.requests: list[list[ChatMessage]] = []
        self.closed = False

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
        self.requests.append(list(messages))
        if self.open_error:
            raise self.open_error
        if self.error:
            raise self.error
        return LLMResponse(
            content="".join(self.chunks),
            model=model or self._model,
            usage={"prompt_tokens": 3, "completion_tokens": 5, "total_tokens": 8},
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        self.requests.append(list(messages))
        if self.open_error:
            raise self.open_error
        return StreamingResponse.from_generator(self._generate)

    async def _generate(self, response: StreamingResponse) -> AsyncIterator[str]:
        if self.gate is not None:
            await self.gate.wait()
        for chunk in self.chunks:
            if self.delay:
                await asyncio.sleep(self.delay)
            yield chunk
        if self.error:
            raise self.error
        response.set_usage({"prompt_tokens": 3, "completion_tokens": 5, "total_tokens": 8})

    async def close(self) -> None:
        self.closed = True


def type_text(session: ChatSession, text: str) -> None:
    """Feed literal key presses to a session the way the terminal reports them."""
    for char in text:
        key = "space" if char == " " else char
        session.handle_key(key, char)


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "anthropic": os.getenv("ANTHROPIC_API_KEY"),
    }


@pytest.fixture
def fake_provider():
    """Provider that streams "Hello" in three chunks."""
    return FakeProvider(chunks=["H", "el", "lo"])


@pytest.fixture
def make_relay():
    """Build a relay around a provider with a short poll interval."""
    def _make(provider: LLMProvider, stream: bool = True, capacity: int = 100) -> StreamRelay:
        gateway = CompletionGateway(provider, stream=stream)
        return StreamRelay(gateway, capacity=capacity, poll_interval=0.01)
    return _make
