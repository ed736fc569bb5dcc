"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- How the rendered chat view is displayed and scrolled
- Log rendering, level filtering and visibility
"""

from datetime import datetime

from rich.text import Text
from textual.containers import VerticalScroll
from textual.widgets import RichLog, Static

from .config import (
    LOG_COMPONENT_COLORS,
    LOG_LEVEL_COLORS,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    LogLevel,
)


class ChatView(VerticalScroll):
    """Scrollable container showing the rendered session text."""

    BORDER_TITLE = "Chat"
    can_focus = False

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._body = Static("", id="chat-body")
        self._plain = ""

    def compose(self):
        yield self._body

    @property
    def plain_text(self) -> str:
        """Text currently displayed, without styling."""
        return self._plain

    def show(self, content: Text) -> None:
        """Replace the displayed text and keep the latest line in view."""
        self._plain = content.plain
        self._body.update(content)
        self.scroll_end(animate=False)


class LogPanel(RichLog):
    """Log panel for request tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"
    can_focus = False

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level
        self.entries: list[str] = []

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def record(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, LLM, Relay, Session)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = LOG_LEVEL_COLORS.get(level, "white")
        level_name = LogLevel.name(level)
        comp_color = LOG_COMPONENT_COLORS.get(component, "white")

        self.entries.append(f"{level_name} [{component}] {message}")
        line = Text()
        line.append(timestamp, style="dim")
        line.append(f" {level_name:<7} ", style=level_color)
        line.append(f"[{component}]", style=comp_color)
        line.append(f" {message}")
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.record(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.record(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.record(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.record(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
