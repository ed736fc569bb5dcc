"""
llmtui: a terminal chat client for streaming language-model completions.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .chat import ChatSession, CompletionGateway, StreamRelay, Transcript
from .config import ChatSettings, load_settings
from .exceptions import ConduitClosedError, ConfigurationError, LLMTuiError

__all__ = [
    "ChatSession",
    "ChatSettings",
    "CompletionGateway",
    "ConduitClosedError",
    "ConfigurationError",
    "LLMTuiError",
    "StreamRelay",
    "Transcript",
    "load_settings",
]
