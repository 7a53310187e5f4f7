"""AI Provider implementations."""

from compareai.providers.base import (
    AuthenticationError,
    BaseProvider,
    ContentPolicyError,
    ProviderError,
    RateLimitError,
)
from compareai.providers.openai_provider import (
    DeepSeekProvider,
    OpenAIProvider,
    PerplexityProvider,
    XAIProvider,
)
from compareai.providers.anthropic_provider import AnthropicProvider
from compareai.providers.google_provider import GoogleProvider
from compareai.providers.registry import ProviderRegistry

__all__ = [
    "BaseProvider",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ContentPolicyError",
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "DeepSeekProvider",
    "XAIProvider",
    "PerplexityProvider",
    "ProviderRegistry",
]
