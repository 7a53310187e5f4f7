"""Tests for the fan-out Orchestrator."""

import asyncio

import pytest
from unittest.mock import AsyncMock, patch

from compareai.core.errors import InvalidRequest
from compareai.core.fallback import DEFAULT_PLACEHOLDER, MOCK_RESPONSES, FallbackResponder
from compareai.core.models import GenerationRequest, ResultSource
from compareai.core.orchestrator import Orchestrator
from compareai.history.recorder import NullHistoryRecorder
from compareai.providers.anthropic_provider import AnthropicProvider
from compareai.providers.openai_provider import DeepSeekProvider, OpenAIProvider, XAIProvider
from compareai.providers.registry import ProviderRegistry
from compareai.utils.metrics import Metrics


@pytest.fixture
def openai_provider():
    return OpenAIProvider(api_key="test-openai")


@pytest.fixture
def anthropic_provider():
    return AnthropicProvider(api_key="test-anthropic")


@pytest.fixture
def orch(openai_provider, anthropic_provider):
    return Orchestrator(
        ProviderRegistry([openai_provider, anthropic_provider]),
        recorder=NullHistoryRecorder(),
        metrics=Metrics(),
        adapter_timeout=None,
    )


class TestInvalidRequests:
    """Requests rejected before any adapter is invoked."""

    @pytest.mark.asyncio
    async def test_empty_model_ids(self, orch, openai_provider):
        with patch.object(openai_provider, "invoke", new_callable=AsyncMock) as invoke:
            with pytest.raises(InvalidRequest, match="Model ID is required"):
                await orch.generate("hi", [])
            invoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_all_unknown_ids(self, orch):
        with pytest.raises(InvalidRequest, match="Invalid model ID"):
            await orch.generate("hi", ["unknown-id"])

    @pytest.mark.asyncio
    async def test_blank_prompt(self, orch, openai_provider):
        with patch.object(openai_provider, "invoke", new_callable=AsyncMock) as invoke:
            with pytest.raises(InvalidRequest, match="Prompt is required"):
                await orch.generate("   ", ["gpt"])
            invoke.assert_not_called()


class TestGenerate:
    """Tests for Orchestrator.generate()."""

    @pytest.mark.asyncio
    async def test_live_and_fallback(self, orch, openai_provider, anthropic_provider):
        with patch.object(
            openai_provider,
            "invoke",
            new_callable=AsyncMock,
            return_value="text A",
        ), patch.object(
            anthropic_provider,
            "invoke",
            new_callable=AsyncMock,
            side_effect=Exception("API Error"),
        ):
            response = await orch.generate("Explain gravity", ["gpt", "claude"])

        assert response.prompt == "Explain gravity"
        assert response.errored_count == 1
        assert set(response.results) == {"gpt", "claude"}

        gpt = response.results["gpt"]
        assert gpt.text == "text A"
        assert gpt.source == ResultSource.LIVE
        assert gpt.prompt == "Explain gravity"
        assert gpt.error is None

        claude = response.results["claude"]
        assert claude.text == MOCK_RESPONSES["claude"]
        assert claude.source == ResultSource.FALLBACK
        assert "API Error" in claude.error

    @pytest.mark.asyncio
    async def test_all_live(self, orch, openai_provider, anthropic_provider):
        with patch.object(
            openai_provider, "invoke", new_callable=AsyncMock, return_value="OpenAI response"
        ), patch.object(
            anthropic_provider, "invoke", new_callable=AsyncMock, return_value="Claude response"
        ):
            response = await orch.generate("Test prompt", ["gpt", "claude"])

        assert response.errored_count == 0
        assert len(response.live_results) == 2
        assert response.fallback_results == []
        assert [m.id for m in response.resolved_models] == ["gpt", "claude"]

    @pytest.mark.asyncio
    async def test_adapter_receives_provider_model_and_token_cap(self, openai_provider):
        orch = Orchestrator(
            ProviderRegistry([openai_provider]),
            recorder=NullHistoryRecorder(),
            metrics=Metrics(),
            max_output_tokens=256,
        )
        with patch.object(
            openai_provider, "invoke", new_callable=AsyncMock, return_value="ok"
        ) as invoke:
            await orch.generate("hello", ["gpt"])

        invoke.assert_awaited_once_with("gpt-4o", "hello", 256)

    @pytest.mark.asyncio
    async def test_unknown_ids_are_dropped(self, orch, openai_provider):
        with patch.object(openai_provider, "invoke", new_callable=AsyncMock, return_value="ok"):
            response = await orch.generate("hi", ["gpt", "does-not-exist"])

        assert list(response.results) == ["gpt"]
        assert [m.id for m in response.resolved_models] == ["gpt"]

    @pytest.mark.asyncio
    async def test_results_follow_registry_order(self, orch, openai_provider, anthropic_provider):
        with patch.object(
            openai_provider, "invoke", new_callable=AsyncMock, return_value="a"
        ), patch.object(
            anthropic_provider, "invoke", new_callable=AsyncMock, return_value="b"
        ):
            response = await orch.generate("hi", ["claude", "gpt"])

        assert list(response.results) == ["gpt", "claude"]

    @pytest.mark.asyncio
    async def test_duplicate_ids_dispatch_once(self, orch, openai_provider):
        with patch.object(
            openai_provider, "invoke", new_callable=AsyncMock, return_value="ok"
        ) as invoke:
            response = await orch.generate("hi", ["gpt", "gpt"])

        assert invoke.await_count == 1
        assert len(response.results) == 1

    @pytest.mark.asyncio
    async def test_model_without_adapter_is_skipped(self, orch, openai_provider):
        with patch.object(openai_provider, "invoke", new_callable=AsyncMock, return_value="ok"):
            response = await orch.generate("hi", ["gpt", "llama", "gemini"])

        assert list(response.results) == ["gpt"]
        assert response.skipped == ["gemini", "llama"]
        assert response.errored_count == 0

    @pytest.mark.asyncio
    async def test_only_skipped_models_yields_empty_results(self, orch):
        response = await orch.generate("hi", ["llama"])

        assert response.results == {}
        assert response.skipped == ["llama"]
        assert response.resolved_models == []

    @pytest.mark.asyncio
    async def test_fallback_placeholder_for_model_without_mock(self):
        xai = XAIProvider(api_key="test-xai")
        orch = Orchestrator(
            ProviderRegistry([xai]),
            recorder=NullHistoryRecorder(),
            metrics=Metrics(),
        )
        with patch.object(xai, "invoke", new_callable=AsyncMock, side_effect=RuntimeError("down")):
            response = await orch.generate("hi", ["grok"])

        assert response.results["grok"].text == DEFAULT_PLACEHOLDER
        assert response.results["grok"].source == ResultSource.FALLBACK
        assert response.errored_count == 1

    @pytest.mark.asyncio
    async def test_failed_deepseek_gets_placeholder(self):
        deepseek = DeepSeekProvider(api_key="test-deepseek")
        orch = Orchestrator(
            ProviderRegistry([deepseek]),
            recorder=NullHistoryRecorder(),
            metrics=Metrics(),
        )
        with patch.object(deepseek, "invoke", new_callable=AsyncMock, side_effect=RuntimeError("down")):
            response = await orch.generate("hi", ["deepseek"])

        assert response.results["deepseek"].text == DEFAULT_PLACEHOLDER
        assert response.results["deepseek"].source == ResultSource.FALLBACK

    @pytest.mark.asyncio
    async def test_run_accepts_request_model(self, orch, openai_provider):
        with patch.object(
            openai_provider, "invoke", new_callable=AsyncMock, return_value="ok"
        ) as invoke:
            response = await orch.run(GenerationRequest(prompt="hello", model_ids=["gpt"]))

        invoke.assert_awaited_once()
        assert response.results["gpt"].text == "ok"

    @pytest.mark.asyncio
    async def test_run_validates_like_generate(self, orch):
        with pytest.raises(InvalidRequest, match="Model ID is required"):
            await orch.run(GenerationRequest(prompt="hello"))

    @pytest.mark.asyncio
    async def test_custom_fallback_responder(self, openai_provider):
        orch = Orchestrator(
            ProviderRegistry([openai_provider]),
            fallback=FallbackResponder({"gpt": "canned"}),
            recorder=NullHistoryRecorder(),
            metrics=Metrics(),
        )
        with patch.object(openai_provider, "invoke", new_callable=AsyncMock, side_effect=ValueError):
            response = await orch.generate("hi", ["gpt"])

        assert response.results["gpt"].text == "canned"
        assert response.results["gpt"].error == "ValueError"

    @pytest.mark.asyncio
    async def test_identical_inputs_give_identical_results(
        self, orch, openai_provider, anthropic_provider
    ):
        with patch.object(
            openai_provider, "invoke", new_callable=AsyncMock, return_value="fixed"
        ), patch.object(
            anthropic_provider, "invoke", new_callable=AsyncMock, side_effect=Exception("no")
        ):
            first = await orch.generate("same", ["gpt", "claude"])
            second = await orch.generate("same", ["gpt", "claude"])

        def shape(response):
            return (
                response.prompt,
                response.errored_count,
                {k: (r.id, r.prompt, r.text, r.source) for k, r in response.results.items()},
            )

        assert shape(first) == shape(second)


class TestConcurrency:
    """Adapters run concurrently and settle independently."""

    @pytest.mark.asyncio
    async def test_adapters_run_in_parallel(self, orch, openai_provider, anthropic_provider):
        started = 0
        both_started = asyncio.Event()

        async def rendezvous(model, prompt, max_output_tokens):
            nonlocal started
            started += 1
            if started == 2:
                both_started.set()
            # Deadlocks if the calls run one after the other
            await asyncio.wait_for(both_started.wait(), timeout=1.0)
            return model

        with patch.object(openai_provider, "invoke", side_effect=rendezvous), \
                patch.object(anthropic_provider, "invoke", side_effect=rendezvous):
            response = await orch.generate("hi", ["gpt", "claude"])

        assert response.errored_count == 0
        assert response.results["gpt"].text == "gpt-4o"

    @pytest.mark.asyncio
    async def test_slow_failure_does_not_affect_sibling(
        self, orch, openai_provider, anthropic_provider
    ):
        async def slow_failure(model, prompt, max_output_tokens):
            await asyncio.sleep(0.05)
            raise ConnectionError("reset")

        with patch.object(
            openai_provider, "invoke", new_callable=AsyncMock, return_value="fast"
        ), patch.object(anthropic_provider, "invoke", side_effect=slow_failure):
            response = await orch.generate("hi", ["gpt", "claude"])

        assert response.results["gpt"].source == ResultSource.LIVE
        assert response.results["gpt"].text == "fast"
        assert response.results["claude"].source == ResultSource.FALLBACK
        assert response.errored_count == 1

    @pytest.mark.asyncio
    async def test_timeout_feeds_fallback(self, openai_provider, anthropic_provider):
        orch = Orchestrator(
            ProviderRegistry([openai_provider, anthropic_provider]),
            recorder=NullHistoryRecorder(),
            metrics=Metrics(),
            adapter_timeout=0.05,
        )

        async def hang(model, prompt, max_output_tokens):
            await asyncio.sleep(10)
            return "too late"

        with patch.object(openai_provider, "invoke", side_effect=hang), \
                patch.object(anthropic_provider, "invoke", new_callable=AsyncMock, return_value="ok"):
            response = await orch.generate("hi", ["gpt", "claude"])

        assert response.results["gpt"].source == ResultSource.FALLBACK
        assert response.results["gpt"].error == "Timeout"
        assert response.results["claude"].text == "ok"
        assert response.errored_count == 1


class TestHistoryRecording:
    """Live results are handed to the history recorder."""

    @pytest.mark.asyncio
    async def test_records_only_live_results(self, openai_provider, anthropic_provider):
        recorder = AsyncMock()
        orch = Orchestrator(
            ProviderRegistry([openai_provider, anthropic_provider]),
            recorder=recorder,
            metrics=Metrics(),
        )
        with patch.object(
            openai_provider, "invoke", new_callable=AsyncMock, return_value="text A"
        ), patch.object(
            anthropic_provider, "invoke", new_callable=AsyncMock, side_effect=Exception("x")
        ):
            await orch.generate("Explain gravity", ["gpt", "claude"])
            await orch.aclose()

        recorder.record.assert_awaited_once_with("Explain gravity", "gpt", "text A")

    @pytest.mark.asyncio
    async def test_recorder_failure_is_contained(self, openai_provider):
        recorder = AsyncMock()
        recorder.record.side_effect = RuntimeError("disk full")
        orch = Orchestrator(
            ProviderRegistry([openai_provider]),
            recorder=recorder,
            metrics=Metrics(),
        )
        with patch.object(openai_provider, "invoke", new_callable=AsyncMock, return_value="ok"):
            response = await orch.generate("hi", ["gpt"])
            await orch.aclose()

        assert response.results["gpt"].source == ResultSource.LIVE
        assert response.errored_count == 0


class TestMetricsAndCatalogue:
    """Metrics and model listing."""

    @pytest.mark.asyncio
    async def test_metrics_recorded(self, openai_provider, anthropic_provider):
        metrics = Metrics()
        orch = Orchestrator(
            ProviderRegistry([openai_provider, anthropic_provider]),
            recorder=NullHistoryRecorder(),
            metrics=metrics,
        )
        with patch.object(
            openai_provider, "invoke", new_callable=AsyncMock, return_value="ok"
        ), patch.object(
            anthropic_provider, "invoke", new_callable=AsyncMock, side_effect=KeyError("k")
        ):
            await orch.generate("hi", ["gpt", "claude"])

        summary = metrics.get_summary()
        assert summary["comparisons"] == 1
        assert summary["live_requests"] == 1
        assert summary["fallback_requests"] == 1
        assert summary["models"]["claude"]["errors"] == {"KeyError": 1}

    def test_available_models(self, orch):
        assert orch.available_models == ["gpt", "claude"]

    def test_list_models_flags_availability(self, orch):
        entries = {e["id"]: e for e in orch.list_models()}
        assert entries["gpt"]["available"] is True
        assert entries["llama"]["available"] is False
        assert entries["gpt"]["credentialVar"] == "OPENAI_API_KEY"
