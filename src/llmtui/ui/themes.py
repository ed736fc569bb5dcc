"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Which text style each part of the chat view uses
- The glyphs and labels the renderer prints

``ChatTheme`` is built once at startup and handed to the renderer; nothing
here is mutated at runtime.
"""

from dataclasses import dataclass

from rich.style import Style
from textual.theme import Theme


@dataclass(frozen=True)
class ChatTheme:
    """Immutable styles and labels for the chat view."""

    title: Style = Style(color="#7C3AED", bold=True)
    user: Style = Style(color="#10B981", bold=True)
    assistant: Style = Style(color="#3B82F6", bold=True)
    input: Style = Style(color="#F59E0B", bold=True)
    error: Style = Style(color="#EF4444", bold=True)
    help: Style = Style(color="#6B7280", italic=True)

    title_text: str = "LLM TUI Chat"
    user_label: str = "You: "
    assistant_label: str = "LLM: "
    typing_indicator: str = "LLM is typing..."
    cursor: str = "█"
    help_text: str = "Press Enter to send, Ctrl+C or q to quit"
    fatal_hint: str = "Press q to quit."


DEFAULT_THEME = ChatTheme()


# Catppuccin Mocha palette for the Textual chrome around the chat view
CATPPUCCIN_MOCHA = Theme(
    name="catppuccin-mocha",
    primary="#89b4fa",
    secondary="#cba6f7",
    accent="#f9e2af",
    foreground="#cdd6f4",
    background="#11111b",
    success="#a6e3a1",
    warning="#fab387",
    error="#f38ba8",
    surface="#1e1e2e",
    panel="#181825",
    dark=True,
    variables={
        "border": "#45475a",
        "border-blurred": "#313244",
        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89b4fa",
        "scrollbar-background": "#181825",
        "footer-foreground": "#bac2de",
        "footer-background": "#11111b",
        "footer-key-foreground": "#f9e2af",
        "footer-key-background": "#313244",
        "text-muted": "#6c7086",
    },
)
