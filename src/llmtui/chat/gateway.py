"""Completion gateway: the boundary to the language-model provider.

Hides the design decision of how a reply is obtained (streamed chunks or one
batched completion) and how provider failures surface. Callers only ever see
a finite sequence of cumulative ``Delta`` snapshots, optionally ended by a
single ``GatewayFailure``.
"""

from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any

from ..llm import ChatMessage, LLMProvider

DebugCallback = Callable[[str, str, str], None]


@dataclass(frozen=True)
class Delta:
    """Full response text produced so far (cumulative, not the new fragment)."""

    text: str


@dataclass(frozen=True)
class GatewayFailure:
    """Terminal element: the request failed."""

    description: str


GatewayElement = Delta | GatewayFailure


def describe_error(error: BaseException) -> str:
    """Human-readable description of a provider error."""
    message = str(error).strip()
    return message or type(error).__name__


class CompletionGateway:
    """Turns a provider call into a lazy sequence of cumulative snapshots.

    Example:
        gateway = CompletionGateway(provider)
        async for element in gateway.submit(history):
            match element:
                case Delta(text=text):
                    print(text)
                case GatewayFailure(description=description):
                    print("failed:", description)
    """

    def __init__(
        self,
        provider: LLMProvider,
        model: str | None = None,
        stream: bool = True,
        **request_kwargs: Any,
    ) -> None:
        self._provider = provider
        self._model = model
        self._stream = stream
        self._request_kwargs = request_kwargs
        self._debug_callback: DebugCallback | None = None

    @property
    def model(self) -> str:
        return self._model or self._provider.model

    @property
    def streaming(self) -> bool:
        return self._stream

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the callback receiving (level, component, message) log entries."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "LLM", message)

    async def submit(self, history: list[ChatMessage]) -> AsyncIterator[GatewayElement]:
        """Submit the ordered history and yield cumulative reply snapshots.

        Any exception raised by the provider ends the sequence with a
        ``GatewayFailure``; snapshots already yielded stay valid.
        """
        self._debug("info", f"Requesting {self.model} ({len(history)} messages, "
                            f"{'streaming' if self._stream else 'batched'})")
        try:
            if self._stream:
                async for snapshot in self._streamed(history):
                    yield Delta(snapshot)
            else:
                response = await self._provider.chat_completion(
                    history, model=self._model, **self._request_kwargs
                )
                if response.usage:
                    self._debug("debug", f"Usage: {response.usage}")
                if response.content:
                    yield Delta(response.content)
        except Exception as e:
            self._debug("error", f"Request failed: {describe_error(e)}")
            yield GatewayFailure(describe_error(e))

    async def _streamed(self, history: list[ChatMessage]) -> AsyncIterator[str]:
        stream = await self._provider.chat_completion_stream(
            history, model=self._model, **self._request_kwargs
        )
        text = ""
        async for chunk in stream:
            if not chunk:
                continue
            text += chunk
            yield text
        if stream.usage:
            self._debug("debug", f"Usage: {stream.usage}")
