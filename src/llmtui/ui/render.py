"""Pure rendering of session state.

``render_session`` maps a ``SessionState`` and a ``ChatTheme`` to Rich text.
It has no side effects and never touches the relay.
"""

from rich.text import Text

from ..chat import SessionState
from ..llm import Role
from .themes import DEFAULT_THEME, ChatTheme


def render_fatal(message: str, theme: ChatTheme = DEFAULT_THEME) -> Text:
    text = Text()
    text.append(f"Error: {message}", style=theme.error)
    text.append("\n\n")
    text.append(theme.fatal_hint, style=theme.help)
    return text


def render_session(state: SessionState, theme: ChatTheme = DEFAULT_THEME) -> Text:
    """Render the full chat view.

    Layout, top to bottom: title, transcript, in-flight reply (typing
    indicator or partial text with a cursor), last error, input line (cursor
    only while idle), help line. A fatal error replaces everything.
    """
    if state.fatal_error is not None:
        return render_fatal(state.fatal_error, theme)

    text = Text()
    text.append(theme.title_text, style=theme.title)
    text.append("\n")
    text.append("=" * len(theme.title_text), style=theme.title)
    text.append("\n\n")

    for message in state.transcript:
        if message.role == Role.USER:
            text.append(theme.user_label, style=theme.user)
        else:
            text.append(theme.assistant_label, style=theme.assistant)
        text.append(message.content)
        text.append("\n\n")

    if state.loading:
        if state.streaming and state.partial:
            text.append(theme.assistant_label, style=theme.assistant)
            text.append(state.partial)
            text.append(theme.cursor, style=theme.assistant)
        else:
            text.append(theme.typing_indicator, style=theme.assistant)
        text.append("\n\n")

    if state.error:
        text.append(f"Error: {state.error}", style=theme.error)
        text.append("\n\n")

    text.append(theme.user_label, style=theme.input)
    text.append(state.input_buffer)
    if not state.loading:
        text.append(theme.cursor, style=theme.input)
    text.append("\n\n")

    text.append(theme.help_text, style=theme.help)
    return text
