"""Application settings.

Centralizes how settings are read from the environment so the rest of the
package only ever sees a validated, immutable ``ChatSettings`` object.

Environment variables:
    LLM_PROVIDER: openai, deepseek or anthropic (default: openai)
    OPENAI_API_KEY / DEEPSEEK_API_KEY / ANTHROPIC_API_KEY: credential for the provider
    OPENAI_MODEL / DEEPSEEK_MODEL / ANTHROPIC_MODEL: model identifier
    OPENAI_BASE_URL: custom endpoint for OpenAI-compatible servers
    LLMTUI_STREAM: "false" to use batched completions (default: true)
    LLMTUI_POLL_INTERVAL_MS: relay poll timeout in milliseconds (default: 50)
    LLMTUI_CONDUIT_CAPACITY: pending updates buffered per request (default: 100)
    LLMTUI_SYSTEM_PROMPT: optional system prompt prepended to every request
"""

import os
from collections.abc import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .llm import SUPPORTED_PROVIDERS

_API_KEY_VARS = {
    "openai": "OPENAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

_MODEL_VARS = {
    "openai": "OPENAI_MODEL",
    "deepseek": "DEEPSEEK_MODEL",
    "anthropic": "ANTHROPIC_MODEL",
}

DEFAULT_MODELS = {
    "openai": "gpt-4o",
    "deepseek": "deepseek-chat",
    "anthropic": "claude-sonnet-4-20250514",
}

_FALSE_VALUES = {"0", "false", "no", "off"}


class ChatSettings(BaseModel):
    """Validated, read-once application settings."""

    model_config = ConfigDict(frozen=True)

    provider: str = Field(default="openai", description="LLM provider name")
    api_key: str = Field(min_length=1, description="Credential for the provider")
    model: str = Field(default="gpt-4o", description="Model identifier")
    base_url: str | None = Field(default=None, description="Custom API base URL")
    stream: bool = Field(default=True, description="Stream replies instead of batching")
    poll_interval: float = Field(
        default=0.05,
        gt=0,
        le=1.0,
        description="Seconds the UI waits for a relay event before re-polling"
    )
    conduit_capacity: int = Field(
        default=100,
        ge=1,
        description="Pending updates buffered per request"
    )
    system_prompt: str | None = Field(default=None, description="Optional system prompt")


def load_settings(
    env: Mapping[str, str] | None = None,
    provider: str | None = None,
    model: str | None = None,
    stream: bool | None = None,
) -> ChatSettings:
    """Read settings once from the environment.

    Args:
        env: Mapping to read from (defaults to ``os.environ`` after loading ``.env``)
        provider: Override for LLM_PROVIDER
        model: Override for the provider's model variable
        stream: Override for LLMTUI_STREAM

    Returns:
        Validated ChatSettings

    Raises:
        ConfigurationError: If the credential is missing or a value is invalid
    """
    if env is None:
        load_dotenv()
        env = os.environ

    provider_name = (provider or env.get("LLM_PROVIDER") or "openai").lower()
    if provider_name == "claude":
        provider_name = "anthropic"
    if provider_name not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            f"Unknown LLM provider: {provider_name}. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    key_var = _API_KEY_VARS[provider_name]
    api_key = env.get(key_var, "")
    if not api_key:
        raise ConfigurationError(f"{key_var} not found in environment or .env file")

    if stream is None:
        stream = env.get("LLMTUI_STREAM", "true").strip().lower() not in _FALSE_VALUES

    try:
        return ChatSettings(
            provider=provider_name,
            api_key=api_key,
            model=model or env.get(_MODEL_VARS[provider_name]) or DEFAULT_MODELS[provider_name],
            base_url=env.get("OPENAI_BASE_URL") if provider_name == "openai" else None,
            stream=stream,
            poll_interval=float(env.get("LLMTUI_POLL_INTERVAL_MS", "50")) / 1000,
            conduit_capacity=int(env.get("LLMTUI_CONDUIT_CAPACITY", "100")),
            system_prompt=env.get("LLMTUI_SYSTEM_PROMPT") or None,
        )
    except (ValueError, ValidationError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
