"""
Fan-out orchestrator - the heart of CompareAI.

Sends one prompt to every requested model in parallel and collects the
results side by side:
- Unknown model ids are filtered out through the model registry
- Every adapter call runs concurrently; all calls settle before returning
- A failing or slow adapter falls back to a canned response
- Successful generations are handed to a history recorder in the background
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any

import structlog

from compareai.core.config import get_settings
from compareai.core.errors import InvalidRequest
from compareai.core.fallback import FallbackResponder
from compareai.core.models import (
    AggregateResponse,
    GenerationRequest,
    GenerationResult,
    ModelDescriptor,
    ResultSource,
)
from compareai.core.registry import MODEL_REGISTRY, ModelRegistry
from compareai.history.recorder import HistoryRecorder, LoggingHistoryRecorder
from compareai.providers.base import BaseProvider
from compareai.providers.registry import ProviderRegistry
from compareai.utils.metrics import Metrics, metrics as default_metrics

logger = structlog.get_logger()

_UNSET: Any = object()


@dataclass(frozen=True)
class _Outcome:
    """What one dispatched model produced."""

    result: GenerationResult
    failed: bool


class Orchestrator:
    """
    Multi-model fan-out orchestrator.

    All collaborators are injectable; anything omitted is built from settings.
    """

    def __init__(
        self,
        providers: ProviderRegistry | None = None,
        *,
        models: ModelRegistry = MODEL_REGISTRY,
        fallback: FallbackResponder | None = None,
        recorder: HistoryRecorder | None = None,
        metrics: Metrics | None = None,
        adapter_timeout: float | None = _UNSET,
        max_output_tokens: int | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            providers: Adapter registry (built from provider settings if omitted)
            models: Model registry used to resolve ids
            fallback: Responder used when an adapter fails
            recorder: Sink for successful live generations
            metrics: Metrics collector (process-wide collector if omitted)
            adapter_timeout: Per-call timeout in seconds; None waits indefinitely
            max_output_tokens: Token cap passed to every adapter
        """
        settings = get_settings().compare

        self.providers = providers if providers is not None else ProviderRegistry.from_settings()
        self.models = models
        self.fallback = fallback or FallbackResponder()
        self.recorder = recorder or LoggingHistoryRecorder()
        self.metrics = metrics or default_metrics
        self.adapter_timeout = (
            settings.adapter_timeout if adapter_timeout is _UNSET else adapter_timeout
        )
        self.max_output_tokens = max_output_tokens or settings.max_output_tokens
        self._background: set[asyncio.Task[None]] = set()

        logger.info(
            "Orchestrator initialized",
            available_providers=[p.value for p in self.providers.available_providers],
            adapter_timeout=self.adapter_timeout,
        )

    async def generate(self, prompt: str, model_ids: list[str]) -> AggregateResponse:
        """
        Send a prompt to several models and collect every response.

        Args:
            prompt: The prompt text
            model_ids: Registry ids of the models to query

        Returns:
            AggregateResponse with one result per dispatched model

        Raises:
            InvalidRequest: If no model ids are given, the prompt is blank,
                or none of the ids is known
        """
        if not model_ids:
            raise InvalidRequest("Model ID is required")
        if not prompt or not prompt.strip():
            raise InvalidRequest("Prompt is required", model_ids=model_ids)

        resolved = self.models.lookup(model_ids)
        if not resolved:
            raise InvalidRequest("Invalid model ID", model_ids=model_ids)

        dispatch: list[tuple[ModelDescriptor, BaseProvider]] = []
        skipped: list[str] = []
        for model in resolved:
            adapter = self.providers.get(model.provider)
            if adapter is None:
                # Skipped models produce no result entry
                skipped.append(model.id)
                logger.warning(
                    "No adapter for provider, skipping model",
                    model_id=model.id,
                    provider=model.provider.value,
                )
                continue
            dispatch.append((model, adapter))

        self.metrics.record_comparison()
        outcomes = await asyncio.gather(
            *(self._dispatch(model, adapter, prompt) for model, adapter in dispatch)
        )

        errored_count = sum(1 for outcome in outcomes if outcome.failed)
        if errored_count:
            logger.warning(
                "Models fell back to mock responses",
                errored_count=errored_count,
                dispatched=len(dispatch),
            )

        return AggregateResponse(
            prompt=prompt,
            results={outcome.result.id: outcome.result for outcome in outcomes},
            errored_count=errored_count,
            resolved_models=[model for model, _ in dispatch],
            skipped=skipped,
        )

    async def run(self, request: GenerationRequest) -> AggregateResponse:
        """Run a validated request model through ``generate()``."""
        return await self.generate(request.prompt, request.model_ids)

    async def _dispatch(
        self,
        model: ModelDescriptor,
        adapter: BaseProvider,
        prompt: str,
    ) -> _Outcome:
        """Invoke one adapter, substituting the fallback text on any failure."""
        start = time.perf_counter()
        try:
            text = await asyncio.wait_for(
                adapter.invoke(model.provider_model, prompt, self.max_output_tokens),
                timeout=self.adapter_timeout,
            )
        except Exception as e:
            error_type = "Timeout" if isinstance(e, asyncio.TimeoutError) else type(e).__name__
            logger.error(
                "Model generation failed, using fallback",
                model_id=model.id,
                provider=model.provider.value,
                error_type=error_type,
                error=str(e),
            )
            self.metrics.record_fallback(model.provider.value, model.id, error_type)
            return _Outcome(
                result=GenerationResult(
                    id=model.id,
                    prompt=prompt,
                    text=self.fallback.respond(model.id),
                    source=ResultSource.FALLBACK,
                    error=f"{error_type}: {e}" if str(e) else error_type,
                ),
                failed=True,
            )

        latency_ms = (time.perf_counter() - start) * 1000
        self.metrics.record_live(model.provider.value, model.id, latency_ms)
        self._record_history(prompt, model.id, text)

        return _Outcome(
            result=GenerationResult(
                id=model.id,
                prompt=prompt,
                text=text,
                source=ResultSource.LIVE,
                latency_ms=latency_ms,
            ),
            failed=False,
        )

    def _record_history(self, prompt: str, model_id: str, text: str) -> None:
        """Schedule a best-effort history record without awaiting it."""
        task = asyncio.ensure_future(self._safe_record(prompt, model_id, text))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _safe_record(self, prompt: str, model_id: str, text: str) -> None:
        try:
            await self.recorder.record(prompt, model_id, text)
        except Exception as e:
            logger.warning("History record failed", model_id=model_id, error=str(e))

    async def aclose(self) -> None:
        """Wait for pending history records to finish."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    @property
    def available_models(self) -> list[str]:
        """Model ids whose provider has a registered adapter."""
        return [m.id for m in self.models if m.provider in self.providers]

    def list_models(self) -> list[dict[str, Any]]:
        """All registry entries with an availability flag."""
        return [
            {**m.to_dict(), "available": m.provider in self.providers}
            for m in self.models
        ]
