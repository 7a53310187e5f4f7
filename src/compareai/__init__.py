"""
CompareAI - Side-by-side LLM comparison

Send one prompt to several model providers in parallel and compare the
responses, with per-provider failure isolation and canned fallbacks.
"""

__version__ = "0.1.0"
__author__ = "CompareAI Team"

from compareai.core.orchestrator import Orchestrator
from compareai.core.errors import InvalidRequest
from compareai.core.models import (
    AggregateResponse,
    GenerationResult,
    ModelDescriptor,
    ModelProvider,
    ResultSource,
)

__all__ = [
    "Orchestrator",
    "InvalidRequest",
    "AggregateResponse",
    "GenerationResult",
    "ModelDescriptor",
    "ModelProvider",
    "ResultSource",
]
