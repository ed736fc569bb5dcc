class LLMTuiError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(LLMTuiError):
    """Raised when required settings (such as the API key) are missing or invalid."""


class ConduitClosedError(LLMTuiError):
    """Raised when a conduit is written to, or closed, after it was closed."""
