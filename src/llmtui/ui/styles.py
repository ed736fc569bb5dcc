"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Text colors inside the chat view come from ``ChatTheme``; this file only
lays out the panels around it.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Chat View - Primary Focus Area
   ============================================ */
#chat-view {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    padding: 0 1;
    scrollbar-gutter: stable;

    &.-fatal {
        border: round $error;
        border-title-color: $error;
    }
}

#chat-body {
    width: 100%;
    height: auto;
}

/* ============================================
   Log Panel - hidden until --log-level or Ctrl+D
   ============================================ */
#log-panel {
    display: none;
    height: 12;
    background: $surface;
    border: round $border;
    border-title-color: $text-muted;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}
"""
