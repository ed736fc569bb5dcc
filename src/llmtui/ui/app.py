"""Main Textual TUI application.

Hosts the chat session: forwards key presses and relay events to the
``ChatSession`` state machine, carries out the commands it returns, and
redraws the view. All session state is mutated from message handlers on the
app's event loop; the relay poll runs in a worker that only posts messages.
"""

from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.message import Message

from ..chat import (
    ChatSession,
    Command,
    Phase,
    PollRelay,
    Quit,
    RelayEvent,
    StartRequest,
    StreamDone,
    StreamError,
    StreamHandle,
    StreamRelay,
    Transcript,
)
from .config import LogLevel
from .render import render_session
from .styles import APP_CSS
from .themes import CATPPUCCIN_MOCHA, DEFAULT_THEME, ChatTheme
from .widgets import ChatView, LogPanel


class RelayPolled(Message):
    """Posted by the poll worker with the event it received."""

    def __init__(self, request_id: int, event: RelayEvent) -> None:
        super().__init__()
        self.request_id = request_id
        self.event = event


class ChatApp(App):
    """Textual TUI for streaming LLM chat."""

    CSS = APP_CSS
    TITLE = "LLM TUI Chat"
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("ctrl+d", "toggle_log", "Log", priority=True),
    ]

    def __init__(
        self,
        relay: StreamRelay | None = None,
        fatal_error: str | None = None,
        chat_theme: ChatTheme = DEFAULT_THEME,
        log_level: str | None = None,
        system_prompt: str | None = None,
    ) -> None:
        super().__init__()
        if relay is None and fatal_error is None:
            raise ValueError("ChatApp needs either a relay or a fatal error to show")
        self._relay = relay
        self._chat_theme = chat_theme
        self._log_level = log_level
        self._session = ChatSession(
            transcript=Transcript(system_prompt=system_prompt),
            fatal_error=fatal_error,
        )
        self._handle: StreamHandle | None = None

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield ChatView(id="chat-view")
        yield LogPanel(id="log-panel")

    def on_mount(self) -> None:
        self.register_theme(CATPPUCCIN_MOCHA)
        self.theme = "catppuccin-mocha"

        log_panel = self.query_one("#log-panel", LogPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        if self._relay is not None:
            self._relay.set_debug_callback(self._debug)
            gateway = self._relay.gateway
            mode = "streaming" if gateway.streaming else "batched"
            self.sub_title = f"{gateway.model} | {mode}"
        else:
            self.query_one("#chat-view", ChatView).add_class("-fatal")
            log_panel.error("TUI", self._session.state.fatal_error or "")

        self._refresh_view()

    def _debug(self, level: str, component: str, message: str) -> None:
        """Route (level, component, message) log entries to the log panel."""
        log_panel = self.query_one("#log-panel", LogPanel)
        log_panel.record(component, message, LogLevel.from_string(level))

    def _refresh_view(self) -> None:
        view = self.query_one("#chat-view", ChatView)
        view.show(render_session(self._session.state, self._chat_theme))

    def on_key(self, event: events.Key) -> None:
        event.stop()
        command = self._session.handle_key(event.key, event.character)
        self._run_command(command)
        self._refresh_view()

    def on_relay_polled(self, message: RelayPolled) -> None:
        if self._handle is None or message.request_id != self._handle.request_id:
            return
        if isinstance(message.event, (StreamDone, StreamError)):
            # Terminal: the conduit is never read again
            self._handle = None
        command = self._session.handle_relay_event(message.event)
        self._run_command(command)
        self._refresh_view()

    def _run_command(self, command: Command | None) -> None:
        match command:
            case Quit():
                self.exit()
            case StartRequest(history=history):
                if self._relay is None:
                    return
                self._handle = self._relay.start(list(history))
                self._debug("debug", "Session", f"Request started with {len(history)} messages")
                self._poll_relay(self._handle)
            case PollRelay():
                if self._handle is not None:
                    self._poll_relay(self._handle)

    @work(group="relay")
    async def _poll_relay(self, handle: StreamHandle) -> None:
        """Wait briefly for the next relay event and hand it to the app."""
        event = await self._relay.poll(handle)
        self.post_message(RelayPolled(handle.request_id, event))

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        # Only quit is live on the fatal screen
        if action == "toggle_log" and self._session.phase == Phase.FATAL:
            return False
        return True

    def action_toggle_log(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#log-panel", LogPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)


async def run_chat_tui(
    relay: StreamRelay | None,
    fatal_error: str | None = None,
    log_level: str | None = None,
    system_prompt: str | None = None,
) -> int:
    """Run the chat TUI until the user quits.

    Args:
        relay: Relay for the configured gateway (None when configuration failed)
        fatal_error: Configuration error to show instead of the chat
        log_level: Log level for panel (debug/info/warning/error), None to hide
        system_prompt: Optional system prompt sent with every request

    Returns:
        The app's return code (0 on normal quit)
    """
    app = ChatApp(
        relay=relay,
        fatal_error=fatal_error,
        log_level=log_level,
        system_prompt=system_prompt,
    )
    await app.run_async()
    return app.return_code or 0
