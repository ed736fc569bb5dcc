"""Unit tests for the completion gateway."""
from conftest import FakeProvider

from llmtui.chat import CompletionGateway, Delta, GatewayFailure
from llmtui.llm import ChatMessage

HISTORY = [ChatMessage.user("hi")]


async def collect(gateway: CompletionGateway, history=HISTORY):
    return [element async for element in gateway.submit(history)]


class TestStreamingGateway:
    """Tests for cumulative streaming."""

    async def test_deltas_are_cumulative(self, fake_provider):
        elements = await collect(CompletionGateway(fake_provider))
        assert elements == [Delta("H"), Delta("Hel"), Delta("Hello")]

    async def test_history_is_passed_through(self, fake_provider):
        await collect(CompletionGateway(fake_provider))
        assert fake_provider.requests == [HISTORY]

    async def test_empty_chunks_are_skipped(self):
        provider = FakeProvider(chunks=["", "a", "", "b"])
        elements = await collect(CompletionGateway(provider))
        assert elements == [Delta("a"), Delta("ab")]

    async def test_error_while_streaming_keeps_earlier_deltas(self):
        provider = FakeProvider(chunks=["He"], error=RuntimeError("connection reset"))
        elements = await collect(CompletionGateway(provider))
        assert elements == [Delta("He"), GatewayFailure("connection reset")]

    async def test_error_when_opening_stream(self):
        provider = FakeProvider(open_error=ConnectionError("rate limited"))
        elements = await collect(CompletionGateway(provider))
        assert elements == [GatewayFailure("rate limited")]

    async def test_error_without_message_uses_exception_name(self):
        provider = FakeProvider(open_error=TimeoutError())
        elements = await collect(CompletionGateway(provider))
        assert elements == [GatewayFailure("TimeoutError")]

    async def test_empty_reply_yields_nothing(self):
        elements = await collect(CompletionGateway(FakeProvider(chunks=[])))
        assert elements == []

    async def test_usage_is_logged(self, fake_provider):
        entries = []
        gateway = CompletionGateway(fake_provider)
        gateway.set_debug_callback(lambda level, component, message: entries.append(message))
        await collect(gateway)
        assert any("Usage" in entry for entry in entries)


class TestBatchedGateway:
    """Tests for the non-streaming path."""

    async def test_whole_reply_in_one_delta(self, fake_provider):
        elements = await collect(CompletionGateway(fake_provider, stream=False))
        assert elements == [Delta("Hello")]

    async def test_failure(self):
        provider = FakeProvider(error=RuntimeError("bad request"))
        elements = await collect(CompletionGateway(provider, stream=False))
        assert elements == [GatewayFailure("bad request")]


def test_model_defaults_to_provider_model(fake_provider):
    assert CompletionGateway(fake_provider).model == "fake-model"
    assert CompletionGateway(fake_provider, model="other").model == "other"
