"""Terminal UI module for llmtui.

Provides a Textual-based TUI around the chat session.

Module structure (each module hides a design decision):
- render.py: how session state becomes text (pure)
- themes.py: color palettes, labels and glyphs
- styles.py: CSS layout
- config.py: log levels and UI constants
- widgets.py: chat view and log panel widgets
- app.py: application orchestration (key and relay event flow)
"""

from .app import ChatApp, RelayPolled, run_chat_tui
from .config import LogLevel
from .render import render_fatal, render_session
from .themes import DEFAULT_THEME, ChatTheme
from .widgets import ChatView, LogPanel

__all__ = [
    "ChatApp",
    "ChatTheme",
    "ChatView",
    "DEFAULT_THEME",
    "LogLevel",
    "LogPanel",
    "RelayPolled",
    "render_fatal",
    "render_session",
    "run_chat_tui",
]
