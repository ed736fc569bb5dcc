"""Chat session state machine.

Hides the rules of the conversation flow: which key presses are honored in
which phase, how relay events move a request from "waiting" to "streaming"
to finished, and how failures are recorded. It performs no I/O; each handler
returns the ``Command`` the hosting event loop should carry out next.
"""

from dataclasses import dataclass, field
from enum import Enum

from ..llm import ChatMessage
from .relay import RelayEvent, StreamDone, StreamError, StreamUpdate
from .transcript import Transcript

QUIT_KEYS = ("ctrl+c", "q")
SUBMIT_KEY = "enter"
BACKSPACE_KEY = "backspace"

EMPTY_RESPONSE_ERROR = "Empty response from model"


class Phase(str, Enum):
    IDLE = "idle"
    AWAITING_FIRST_BYTE = "awaiting_first_byte"
    STREAMING = "streaming"
    FATAL = "fatal"


@dataclass(frozen=True)
class Quit:
    """Exit the application now, abandoning any request in flight."""


@dataclass(frozen=True)
class StartRequest:
    """Start a relay request for ``history``."""

    history: tuple[ChatMessage, ...]


@dataclass(frozen=True)
class PollRelay:
    """Poll the active request's relay again."""


Command = Quit | StartRequest | PollRelay


@dataclass
class SessionState:
    """Everything the renderer needs. Mutated only by ChatSession."""

    transcript: Transcript = field(default_factory=Transcript)
    input_buffer: str = ""
    loading: bool = False
    streaming: bool = False
    partial: str = ""
    error: str | None = None
    fatal_error: str | None = None

    @property
    def phase(self) -> Phase:
        if self.fatal_error is not None:
            return Phase.FATAL
        if self.streaming:
            return Phase.STREAMING
        if self.loading:
            return Phase.AWAITING_FIRST_BYTE
        return Phase.IDLE


class ChatSession:
    """Single-owner state machine for one chat session.

    Phases: IDLE -> AWAITING_FIRST_BYTE -> STREAMING -> IDLE, plus an
    absorbing FATAL phase entered when configuration is missing.
    """

    def __init__(
        self,
        transcript: Transcript | None = None,
        fatal_error: str | None = None,
    ) -> None:
        self._state = SessionState(
            transcript=transcript if transcript is not None else Transcript(),
            fatal_error=fatal_error,
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    def handle_key(self, key: str, character: str | None = None) -> Command | None:
        """React to a key press.

        Args:
            key: Key name as reported by the terminal ("enter", "ctrl+c", "a")
            character: Printable character for the key, if any
        """
        state = self._state
        if key in QUIT_KEYS:
            return Quit()
        if state.fatal_error is not None or state.loading:
            return None

        if key == SUBMIT_KEY:
            return self._submit()
        if key == BACKSPACE_KEY:
            state.input_buffer = state.input_buffer[:-1]
            return None
        if character and character.isprintable():
            state.input_buffer += character
        return None

    def _submit(self) -> Command | None:
        state = self._state
        text = state.input_buffer
        if not text.strip():
            return None

        state.transcript.add_user(text)
        state.input_buffer = ""
        state.error = None
        state.loading = True
        state.streaming = False
        state.partial = ""
        return StartRequest(tuple(state.transcript.history()))

    def handle_relay_event(self, event: RelayEvent) -> Command | None:
        """React to one polled relay event."""
        state = self._state
        if not state.loading:
            # Stale event for a request that already finished
            return None

        match event:
            case StreamUpdate(text=text):
                if text:
                    state.partial = text
                    state.streaming = True
                return PollRelay()
            case StreamDone(final_text=final_text):
                if final_text:
                    state.transcript.add_assistant(final_text)
                else:
                    state.error = EMPTY_RESPONSE_ERROR
                self._finish()
            case StreamError(description=description):
                state.error = description
                self._finish()
        return None

    def _finish(self) -> None:
        state = self._state
        state.loading = False
        state.streaming = False
        state.partial = ""
