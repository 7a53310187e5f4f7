"""Registry of configured provider adapters."""

from __future__ import annotations

from typing import Callable, Iterable

import structlog

from compareai.core.config import ProviderSettings, get_provider_settings
from compareai.core.models import ModelProvider
from compareai.core.registry import MODEL_REGISTRY, ModelRegistry
from compareai.providers.anthropic_provider import AnthropicProvider
from compareai.providers.base import BaseProvider
from compareai.providers.google_provider import GoogleProvider
from compareai.providers.openai_provider import (
    DeepSeekProvider,
    OpenAIProvider,
    PerplexityProvider,
    XAIProvider,
)

logger = structlog.get_logger()


ProviderFactory = Callable[[str, ProviderSettings], BaseProvider]

# Meta is intentionally absent: there is no hosted Llama adapter.
PROVIDER_FACTORIES: dict[ModelProvider, ProviderFactory] = {
    ModelProvider.OPENAI: lambda key, s: OpenAIProvider(
        api_key=key,
        base_url=s.openai_base_url,
        organization=s.openai_org_id,
    ),
    ModelProvider.ANTHROPIC: lambda key, s: AnthropicProvider(
        api_key=key,
        base_url=s.anthropic_base_url,
    ),
    ModelProvider.GOOGLE: lambda key, s: GoogleProvider(api_key=key),
    ModelProvider.DEEPSEEK: lambda key, s: DeepSeekProvider(
        api_key=key,
        base_url=s.deepseek_base_url,
    ),
    ModelProvider.XAI: lambda key, s: XAIProvider(api_key=key, base_url=s.xai_base_url),
    ModelProvider.PERPLEXITY: lambda key, s: PerplexityProvider(
        api_key=key,
        base_url=s.perplexity_base_url,
    ),
}


class ProviderRegistry:
    """Maps a provider to the adapter that serves it."""

    def __init__(self, adapters: Iterable[BaseProvider] = ()):
        self._adapters: dict[ModelProvider, BaseProvider] = {}
        for adapter in adapters:
            self.register(adapter)

    @classmethod
    def from_settings(
        cls,
        settings: ProviderSettings | None = None,
        models: ModelRegistry = MODEL_REGISTRY,
    ) -> "ProviderRegistry":
        """
        Build adapters for every provider whose credential is configured.

        Args:
            settings: Provider settings (loaded from the environment if omitted)
            models: Registry used to find each provider's credential variable

        Returns:
            A populated ProviderRegistry
        """
        settings = settings or get_provider_settings()
        registry = cls()

        for model in models:
            if model.provider in registry:
                continue
            factory = PROVIDER_FACTORIES.get(model.provider)
            if factory is None:
                continue
            key = settings.credential(model.credential_var)
            if key is None:
                logger.debug(
                    "Provider credential not set",
                    provider=model.provider.value,
                    credential_var=model.credential_var,
                )
                continue
            registry.register(factory(key, settings))
            logger.info("Provider initialized", provider=model.provider.value)

        return registry

    def register(self, adapter: BaseProvider) -> None:
        self._adapters[adapter.provider] = adapter

    def get(self, provider: ModelProvider) -> BaseProvider | None:
        """Get adapter by provider."""
        return self._adapters.get(provider)

    @property
    def available_providers(self) -> list[ModelProvider]:
        """List providers with a registered adapter."""
        return list(self._adapters)

    def __contains__(self, provider: object) -> bool:
        return provider in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)
