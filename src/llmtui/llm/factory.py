from typing import Any

from .base import LLMProvider
from .providers import DEEPSEEK_BASE_URL, AnthropicProvider, OpenAIProvider

SUPPORTED_PROVIDERS = ("openai", "deepseek", "anthropic")


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    Args:
        provider: Provider type ('openai', 'deepseek', 'anthropic' or 'claude')
        **config: Provider-specific configuration
            For OpenAI:
                - api_key: str (required)
                - model: str (default: 'gpt-4o')
                - base_url: str | None
            For DeepSeek (OpenAI-compatible):
                - api_key: str (required)
                - model: str (default: 'deepseek-chat')
                - base_url: str (default: 'https://api.deepseek.com')
            For Anthropic:
                - api_key: str (required)
                - model: str (default: 'claude-sonnet-4-20250514')

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider("openai", api_key="sk-...", model="gpt-4o")
    """
    provider_lower = provider.lower()

    if provider_lower not in (*SUPPORTED_PROVIDERS, "claude"):
        raise ValueError(
            f"Unsupported provider: {provider}. "
            f"Supported providers: {', '.join(repr(p) for p in SUPPORTED_PROVIDERS)}"
        )

    if not config.get("api_key"):
        raise TypeError(f"{provider_lower} provider requires 'api_key' in config")

    # Drop unset optional values so provider defaults apply
    config = {key: value for key, value in config.items() if value is not None}

    if provider_lower == "openai":
        return OpenAIProvider(**config)

    if provider_lower == "deepseek":
        config.setdefault("model", "deepseek-chat")
        config.setdefault("base_url", DEEPSEEK_BASE_URL)
        return OpenAIProvider(**config)

    return AnthropicProvider(**config)
