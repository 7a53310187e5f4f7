"""
Model registry.

The static list of models a prompt can be sent to. Descriptors are defined
once at import time and never change.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from compareai.core.models import ModelDescriptor, ModelProvider


DEFAULT_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id="gpt",
        name="GPT",
        provider=ModelProvider.OPENAI,
        credential_var="OPENAI_API_KEY",
        provider_model="gpt-4o",
        description="OpenAI's most advanced model, optimized for both vision and language tasks.",
    ),
    ModelDescriptor(
        id="claude",
        name="Claude",
        provider=ModelProvider.ANTHROPIC,
        credential_var="ANTHROPIC_API_KEY",
        provider_model="claude-sonnet-4-5-20250929",
        description="Anthropic's most powerful model for complex reasoning and content generation.",
    ),
    ModelDescriptor(
        id="gemini",
        name="Gemini",
        provider=ModelProvider.GOOGLE,
        credential_var="GOOGLE_API_KEY",
        provider_model="gemini-1.5-pro",
        description="Google's advanced model for text generation and reasoning.",
    ),
    ModelDescriptor(
        id="deepseek",
        name="DeepSeek",
        provider=ModelProvider.DEEPSEEK,
        credential_var="DEEPSEEK_API_KEY",
        provider_model="deepseek-chat",
        description="Specialized model for code generation and understanding.",
    ),
    ModelDescriptor(
        id="llama",
        name="Llama",
        provider=ModelProvider.META,
        credential_var="META_API_KEY",
        provider_model="llama-3-70b",
        description="Meta's largest open model with strong reasoning capabilities.",
    ),
    ModelDescriptor(
        id="grok",
        name="Grok",
        provider=ModelProvider.XAI,
        credential_var="XAI_API_KEY",
        provider_model="grok-2-latest",
        description=(
            "xAI's conversational model, integrated with X (formerly Twitter)."
        ),
    ),
    ModelDescriptor(
        id="perplexity",
        name="Perplexity",
        provider=ModelProvider.PERPLEXITY,
        credential_var="PERPLEXITY_API_KEY",
        provider_model="sonar",
        description="An AI research assistant that combines a language model with real-time web search.",
    ),
)


class ModelRegistry:
    """
    Lookup over a fixed set of model descriptors.

    Ids must be unique. Iteration and lookups follow registration order.
    """

    def __init__(self, models: Iterable[ModelDescriptor] = DEFAULT_MODELS):
        self._models: dict[str, ModelDescriptor] = {}
        for model in models:
            if model.id in self._models:
                raise ValueError(f"Duplicate model id in registry: {model.id}")
            self._models[model.id] = model

    def lookup(self, ids: Iterable[str]) -> list[ModelDescriptor]:
        """
        Resolve model ids to descriptors.

        The registry is filtered by membership in ``ids``, so the result is
        in registry order rather than request order. Unknown ids are dropped
        and duplicates collapse to a single descriptor.
        """
        wanted = set(ids)
        return [model for model in self._models.values() if model.id in wanted]

    def get(self, model_id: str) -> ModelDescriptor | None:
        return self._models.get(model_id)

    @property
    def ids(self) -> list[str]:
        return list(self._models)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._models

    def __iter__(self) -> Iterator[ModelDescriptor]:
        return iter(self._models.values())

    def __len__(self) -> int:
        return len(self._models)


MODEL_REGISTRY = ModelRegistry()
