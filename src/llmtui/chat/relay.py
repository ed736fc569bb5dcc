"""Stream relay between the completion gateway and the UI loop.

Hides the design decision of how replies travel from the network producer to
the single-threaded consumer:
- One producer task per request, running independently of the UI handlers
- A bounded one-way conduit that never blocks the producer
- Terminal-state encoding (update / done / error)

The producer owns the conduit's lifecycle: it closes it exactly once, after
sending exactly one terminal event. The consumer only ever polls.
"""

import asyncio
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from ..exceptions import ConduitClosedError
from ..llm import ChatMessage
from .gateway import CompletionGateway, Delta, GatewayFailure, describe_error

DEFAULT_CAPACITY = 100
DEFAULT_POLL_INTERVAL = 0.05  # seconds


@dataclass(frozen=True)
class StreamUpdate:
    """Cumulative snapshot of the reply; empty text means nothing arrived yet."""

    text: str = ""


@dataclass(frozen=True)
class StreamDone:
    """Terminal: the reply completed with ``final_text``."""

    final_text: str = ""


@dataclass(frozen=True)
class StreamError:
    """Terminal: the request failed."""

    description: str


RelayEvent = StreamUpdate | StreamDone | StreamError


class Conduit:
    """Bounded single-producer/single-consumer handoff.

    ``send`` never blocks: when the conduit is full the oldest pending event
    is dropped. Only partial updates can be pending ahead of a new event, and
    each update is a full snapshot, so nothing is lost by dropping it.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"Conduit capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._items: deque[RelayEvent] = deque()
        self._closed = False
        self._ready = asyncio.Event()
        self.dropped = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._items)

    def send(self, event: RelayEvent) -> bool:
        """Enqueue an event without blocking.

        Returns:
            False if an older pending event had to be dropped to make room

        Raises:
            ConduitClosedError: If the conduit was already closed
        """
        if self._closed:
            raise ConduitClosedError("send on closed conduit")
        dropped = len(self._items) >= self._capacity
        if dropped:
            self._items.popleft()
            self.dropped += 1
        self._items.append(event)
        self._ready.set()
        return not dropped

    def close(self) -> None:
        """Mark the conduit closed. Only the producer calls this, exactly once."""
        if self._closed:
            raise ConduitClosedError("conduit already closed")
        self._closed = True
        self._ready.set()

    async def receive(self, timeout: float) -> RelayEvent | None:
        """Take the next event, waiting at most ``timeout`` seconds.

        Returns:
            The next event, or None if nothing arrived in time

        Raises:
            ConduitClosedError: If the conduit is closed and drained
        """
        if not self._items and not self._closed:
            self._ready.clear()
            try:
                await asyncio.wait_for(self._ready.wait(), timeout)
            except asyncio.TimeoutError:
                return None
        if self._items:
            return self._items.popleft()
        raise ConduitClosedError("conduit closed and drained")


@dataclass
class StreamHandle:
    """Per-request handle: the conduit plus the producer task feeding it."""

    request_id: int
    conduit: Conduit
    task: asyncio.Task = field(repr=False)


class StreamRelay:
    """Runs gateway requests as background producers and serves polls.

    Example:
        relay = StreamRelay(gateway)
        handle = relay.start(history)
        while True:
            event = await relay.poll(handle)
            match event:
                case StreamUpdate(text=text):
                    show(text)
                case StreamDone() | StreamError():
                    break
    """

    def __init__(
        self,
        gateway: CompletionGateway,
        capacity: int = DEFAULT_CAPACITY,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"Conduit capacity must be at least 1, got {capacity}")
        self._gateway = gateway
        self._capacity = capacity
        self._poll_interval = poll_interval
        self._request_count = 0
        self._debug_callback: Callable[[str, str, str], None] | None = None

    @property
    def gateway(self) -> CompletionGateway:
        return self._gateway

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    def set_debug_callback(self, callback: Callable[[str, str, str], None] | None) -> None:
        """Set the (level, component, message) callback for relay and gateway logs."""
        self._debug_callback = callback
        self._gateway.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Relay", message)

    def start(self, history: list[ChatMessage]) -> StreamHandle:
        """Allocate a conduit and launch the producer for one request.

        Must be called from within the running event loop.
        """
        self._request_count += 1
        request_id = self._request_count
        conduit = Conduit(self._capacity)
        task = asyncio.get_running_loop().create_task(
            self._produce(request_id, conduit, list(history)),
            name=f"relay-producer-{request_id}",
        )
        self._debug("debug", f"Request #{request_id} started")
        return StreamHandle(request_id=request_id, conduit=conduit, task=task)

    async def _produce(
        self,
        request_id: int,
        conduit: Conduit,
        history: list[ChatMessage],
    ) -> None:
        final_text = ""
        terminal: RelayEvent | None = None
        try:
            async for element in self._gateway.submit(history):
                match element:
                    case Delta(text=text):
                        if not final_text:
                            self._debug("info", f"Request #{request_id}: first byte received")
                        final_text = text
                        if not conduit.send(StreamUpdate(text)):
                            self._debug("debug", f"Request #{request_id}: dropped stale update")
                    case GatewayFailure(description=description):
                        terminal = StreamError(description)
        except asyncio.CancelledError:
            terminal = StreamError("Request cancelled")
            raise
        except Exception as e:
            terminal = StreamError(describe_error(e))
        finally:
            if terminal is None:
                terminal = StreamDone(final_text)
            conduit.send(terminal)
            conduit.close()

        match terminal:
            case StreamError(description=description):
                self._debug("warning", f"Request #{request_id} failed: {description}")
            case StreamDone(final_text=text):
                self._debug("info", f"Request #{request_id} done ({len(text)} chars)")

    async def poll(self, handle: StreamHandle, timeout: float | None = None) -> RelayEvent:
        """Return the next event for ``handle`` within a bounded wait.

        Returns:
            The next queued event; ``StreamUpdate("")`` if nothing arrived
            within the timeout; ``StreamDone("")`` if the conduit was closed
            with nothing left to read.
        """
        wait = self._poll_interval if timeout is None else timeout
        try:
            event = await handle.conduit.receive(wait)
        except ConduitClosedError:
            return StreamDone("")
        if event is None:
            return StreamUpdate("")
        return event
