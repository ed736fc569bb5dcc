from .base import LLMProvider
from .factory import SUPPORTED_PROVIDERS, create_llm_provider
from .models import ChatMessage, LLMResponse, Role, StreamingResponse
from .providers import AnthropicProvider, OpenAIProvider

__all__ = [
    "LLMProvider",
    "SUPPORTED_PROVIDERS",
    "create_llm_provider",
    "ChatMessage",
    "LLMResponse",
    "Role",
    "StreamingResponse",
    "AnthropicProvider",
    "OpenAIProvider",
]
