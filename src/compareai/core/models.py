"""
Core data models for CompareAI.

Defines the model descriptors, per-model generation results and the
aggregate response returned by a fan-out comparison.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ModelProvider(str, Enum):
    """Providers a model can belong to."""

    OPENAI = "OpenAI"
    ANTHROPIC = "Anthropic"
    GOOGLE = "Google"
    DEEPSEEK = "DeepSeek"
    META = "Meta"
    XAI = "xAI"
    PERPLEXITY = "Perplexity AI"


@dataclass(frozen=True)
class ModelDescriptor:
    """Static registry entry for one addressable model."""

    id: str
    name: str
    provider: ModelProvider
    credential_var: str
    provider_model: str
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        """Convert to the camelCase shape used on the wire."""
        return {
            "id": self.id,
            "name": self.name,
            "provider": self.provider.value,
            "description": self.description,
            "credentialVar": self.credential_var,
            "providerModel": self.provider_model,
        }


class ResultSource(str, Enum):
    """Where the text of a generation result came from."""

    LIVE = "live"
    FALLBACK = "fallback"


class GenerationRequest(BaseModel):
    """A prompt and the models it should be sent to."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    prompt: str
    model_ids: list[str] = Field(default_factory=list)


class GenerationResult(BaseModel):
    """Result from a single model."""

    model_config = ConfigDict(frozen=True)

    id: str
    prompt: str
    text: str
    source: ResultSource
    latency_ms: float = 0.0
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.source == ResultSource.FALLBACK


class AggregateResponse(BaseModel):
    """All results for one prompt, keyed by model id."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    results: dict[str, GenerationResult]
    errored_count: int = 0
    resolved_models: list[ModelDescriptor] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    @property
    def live_results(self) -> list[GenerationResult]:
        """Results produced by a live provider call."""
        return [r for r in self.results.values() if not r.is_fallback]

    @property
    def fallback_results(self) -> list[GenerationResult]:
        """Results substituted by the fallback responder."""
        return [r for r in self.results.values() if r.is_fallback]

    def to_wire(self) -> dict:
        """Serialize to the HTTP response body."""
        return {
            "response": {
                model_id: {
                    "id": result.id,
                    "prompt": result.prompt,
                    "text": result.text,
                    "source": result.source.value,
                    "latencyMs": result.latency_ms,
                    "error": result.error,
                }
                for model_id, result in self.results.items()
            },
            "erroredModel": self.errored_count,
            "models": [m.to_dict() for m in self.resolved_models],
            "prompt": self.prompt,
            "skipped": list(self.skipped),
        }
