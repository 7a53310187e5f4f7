"""Core orchestration components."""

from compareai.core.errors import CompareAIError, InvalidRequest
from compareai.core.fallback import FallbackResponder
from compareai.core.models import (
    AggregateResponse,
    GenerationRequest,
    GenerationResult,
    ModelDescriptor,
    ModelProvider,
    ResultSource,
)
from compareai.core.orchestrator import Orchestrator
from compareai.core.registry import MODEL_REGISTRY, ModelRegistry

__all__ = [
    "Orchestrator",
    "CompareAIError",
    "InvalidRequest",
    "FallbackResponder",
    "AggregateResponse",
    "GenerationRequest",
    "GenerationResult",
    "ModelDescriptor",
    "ModelProvider",
    "ResultSource",
    "ModelRegistry",
    "MODEL_REGISTRY",
]
