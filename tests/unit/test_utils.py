"""Tests for utility modules."""

import pytest
import structlog
from unittest.mock import MagicMock

from compareai.utils.logging import RequestLogger, setup_logging
from compareai.utils.metrics import Metrics


class TestMetrics:
    """Tests for Metrics class."""

    def test_record_live(self):
        metrics = Metrics()
        metrics.record_live(provider="OpenAI", model="gpt", latency_ms=100.0)

        summary = metrics.get_summary()
        assert summary["total_requests"] == 1
        assert summary["live_requests"] == 1
        assert summary["fallback_requests"] == 0
        assert summary["providers"]["OpenAI"]["total_requests"] == 1
        assert summary["models"]["gpt"]["avg_latency_ms"] == 100.0

    def test_record_fallback(self):
        metrics = Metrics()
        metrics.record_fallback(provider="Anthropic", model="claude", error_type="Timeout")

        summary = metrics.get_summary()
        assert summary["fallback_requests"] == 1
        assert summary["providers"]["Anthropic"]["errors"]["Timeout"] == 1

    def test_fallback_rate(self):
        metrics = Metrics()

        # Record 3 live calls and 1 fallback
        for _ in range(3):
            metrics.record_live("OpenAI", "gpt", 100.0)
        metrics.record_fallback("OpenAI", "gpt", "RateLimitError")

        summary = metrics.get_summary()
        assert summary["fallback_rate"] == 0.25
        assert summary["models"]["gpt"]["fallback_rate"] == 0.25

    def test_comparisons(self):
        metrics = Metrics()
        metrics.record_comparison()
        metrics.record_comparison()
        assert metrics.get_summary()["comparisons"] == 2

    def test_recent(self):
        metrics = Metrics()
        for n in range(5):
            metrics.record_live("OpenAI", f"model-{n}", 10.0)

        recent = metrics.recent(limit=3)
        assert [r["model"] for r in recent] == ["model-2", "model-3", "model-4"]
        assert recent[0]["live"] is True

    def test_history_bounded(self):
        metrics = Metrics(max_history=2)
        for n in range(4):
            metrics.record_fallback("xAI", "grok", "Timeout")

        assert len(metrics.recent()) == 2
        assert metrics.get_summary()["fallback_requests"] == 4

    def test_reset(self):
        metrics = Metrics()
        metrics.record_comparison()
        metrics.record_live("OpenAI", "gpt", 100.0)
        metrics.reset()

        summary = metrics.get_summary()
        assert summary["comparisons"] == 0
        assert summary["total_requests"] == 0
        assert summary["providers"] == {}


class TestRequestLogger:
    """Tests for RequestLogger."""

    def test_logs_start_and_completion(self):
        logger = MagicMock()
        bound = logger.bind.return_value

        with RequestLogger(logger, "generate", model_ids=["gpt"]):
            assert structlog.contextvars.get_contextvars()["operation"] == "generate"

        logger.bind.assert_called_once_with(operation="generate", model_ids=["gpt"])
        bound.info.assert_any_call("Starting generate")
        assert bound.info.call_args.args == ("Completed generate",)
        assert "elapsed_ms" in bound.info.call_args.kwargs
        assert "operation" not in structlog.contextvars.get_contextvars()

    def test_logs_failure_and_reraises(self):
        logger = MagicMock()
        bound = logger.bind.return_value

        with pytest.raises(RuntimeError):
            with RequestLogger(logger, "generate"):
                raise RuntimeError("boom")

        bound.error.assert_called_once()
        assert bound.error.call_args.kwargs["error"] == "boom"
        assert bound.error.call_args.kwargs["error_type"] == "RuntimeError"
        assert "operation" not in structlog.contextvars.get_contextvars()


class TestSetupLogging:
    """Tests for logging setup."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_console_format(self):
        setup_logging(level="debug", json_format=False)
        assert structlog.is_configured()

    def test_json_format(self):
        setup_logging(level="WARNING", json_format=True)
        assert structlog.is_configured()
