"""Chat core for llmtui.

Module structure (each module hides a design decision):
- transcript.py: how the ordered message log is stored
- gateway.py: how replies are obtained from the provider
- relay.py: how replies travel from the producer task to the UI loop
- session.py: the conversation state machine
"""

from .gateway import CompletionGateway, Delta, GatewayFailure
from .relay import (
    Conduit,
    RelayEvent,
    StreamDone,
    StreamError,
    StreamHandle,
    StreamRelay,
    StreamUpdate,
)
from .session import (
    ChatSession,
    Command,
    Phase,
    PollRelay,
    Quit,
    SessionState,
    StartRequest,
)
from .transcript import Transcript

__all__ = [
    "ChatSession",
    "Command",
    "CompletionGateway",
    "Conduit",
    "Delta",
    "GatewayFailure",
    "Phase",
    "PollRelay",
    "Quit",
    "RelayEvent",
    "SessionState",
    "StartRequest",
    "StreamDone",
    "StreamError",
    "StreamHandle",
    "StreamRelay",
    "StreamUpdate",
    "Transcript",
]
