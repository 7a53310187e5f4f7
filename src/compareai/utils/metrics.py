"""
In-process metrics for CompareAI.

Counts live generations and fallbacks per provider and per model.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any


@dataclass
class GenerationMetrics:
    """Metrics for a single adapter invocation."""

    timestamp: datetime
    provider: str
    model: str
    latency_ms: float
    live: bool
    error_type: str | None = None


@dataclass
class OutcomeCounts:
    """Aggregated outcomes for a provider or model."""

    total_requests: int = 0
    live_requests: int = 0
    fallback_requests: int = 0
    total_latency_ms: float = 0.0
    errors: dict[str, int] = field(default_factory=lambda: defaultdict(int))

    @property
    def fallback_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.fallback_requests / self.total_requests

    @property
    def avg_latency_ms(self) -> float:
        """Average latency of live calls."""
        if self.live_requests == 0:
            return 0.0
        return self.total_latency_ms / self.live_requests

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "live_requests": self.live_requests,
            "fallback_requests": self.fallback_requests,
            "fallback_rate": self.fallback_rate,
            "avg_latency_ms": self.avg_latency_ms,
            "errors": dict(self.errors),
        }


class Metrics:
    """
    Thread-safe metrics collector.

    Args:
        max_history: Maximum number of invocations kept for ``recent()``
    """

    def __init__(self, max_history: int = 1000):
        self._lock = Lock()
        self._max_history = max_history
        self._history: list[GenerationMetrics] = []
        self._comparisons = 0
        self._providers: dict[str, OutcomeCounts] = defaultdict(OutcomeCounts)
        self._models: dict[str, OutcomeCounts] = defaultdict(OutcomeCounts)
        self._start_time = datetime.now(timezone.utc)

    def record_comparison(self) -> None:
        with self._lock:
            self._comparisons += 1

    def record_live(self, provider: str, model: str, latency_ms: float) -> None:
        """Record a successful live generation."""
        with self._lock:
            self._add(GenerationMetrics(
                timestamp=datetime.now(timezone.utc),
                provider=provider,
                model=model,
                latency_ms=latency_ms,
                live=True,
            ))
            for counts in (self._providers[provider], self._models[model]):
                counts.total_requests += 1
                counts.live_requests += 1
                counts.total_latency_ms += latency_ms

    def record_fallback(self, provider: str, model: str, error_type: str) -> None:
        """Record a generation that fell back to the canned response."""
        with self._lock:
            self._add(GenerationMetrics(
                timestamp=datetime.now(timezone.utc),
                provider=provider,
                model=model,
                latency_ms=0.0,
                live=False,
                error_type=error_type,
            ))
            for counts in (self._providers[provider], self._models[model]):
                counts.total_requests += 1
                counts.fallback_requests += 1
                counts.errors[error_type] += 1

    def _add(self, entry: GenerationMetrics) -> None:
        self._history.append(entry)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

    def get_summary(self) -> dict[str, Any]:
        """Get aggregated counters."""
        with self._lock:
            total = sum(c.total_requests for c in self._providers.values())
            fallbacks = sum(c.fallback_requests for c in self._providers.values())
            uptime = (datetime.now(timezone.utc) - self._start_time).total_seconds()

            return {
                "uptime_seconds": uptime,
                "comparisons": self._comparisons,
                "total_requests": total,
                "live_requests": total - fallbacks,
                "fallback_requests": fallbacks,
                "fallback_rate": fallbacks / total if total > 0 else 0.0,
                "providers": {name: c.to_dict() for name, c in self._providers.items()},
                "models": {name: c.to_dict() for name, c in self._models.items()},
            }

    def recent(self, limit: int = 100) -> list[dict[str, Any]]:
        """Most recent invocations, oldest first."""
        with self._lock:
            return [
                {
                    "timestamp": m.timestamp.isoformat(),
                    "provider": m.provider,
                    "model": m.model,
                    "latency_ms": m.latency_ms,
                    "live": m.live,
                    "error": m.error_type,
                }
                for m in self._history[-limit:]
            ]

    def reset(self) -> None:
        """Reset all metrics."""
        with self._lock:
            self._history.clear()
            self._comparisons = 0
            self._providers.clear()
            self._models.clear()
            self._start_time = datetime.now(timezone.utc)


# Global metrics instance
metrics = Metrics()
