"""
OpenAI provider implementation for ChatGPT models.

Also serves as the base for vendors exposing an OpenAI-compatible chat
completions endpoint (DeepSeek, xAI, Perplexity).
"""

from __future__ import annotations

from typing import Any

from openai import (
    APIError,
    APIStatusError,
    AsyncOpenAI,
    AuthenticationError as OpenAIAuthenticationError,
    RateLimitError as OpenAIRateLimitError,
)

from compareai.core.models import ModelProvider
from compareai.providers.base import (
    AuthenticationError,
    BaseProvider,
    ContentPolicyError,
    ProviderError,
    RateLimitError,
)


class OpenAIProvider(BaseProvider):
    """OpenAI provider for GPT models."""

    provider = ModelProvider.OPENAI
    default_base_url: str | None = None

    # Models that take max_completion_tokens instead of max_tokens
    COMPLETION_TOKEN_MODELS = frozenset({
        "o1", "o3", "o4", "gpt-5",
    })

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        organization: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(api_key, **kwargs)
        self.client = AsyncOpenAI(
            api_key=api_key,
            organization=organization,
            base_url=base_url or self.default_base_url,
        )

    def _uses_completion_tokens(self, model: str) -> bool:
        """Check if model requires max_completion_tokens instead of max_tokens."""
        model_lower = model.lower()
        return any(model_lower.startswith(m) for m in self.COMPLETION_TOKEN_MODELS)

    def _build_params(
        self,
        model: str,
        prompt: str,
        max_output_tokens: int,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self._uses_completion_tokens(model):
            params["max_completion_tokens"] = max_output_tokens
        else:
            params["max_tokens"] = max_output_tokens
        return params

    async def invoke(
        self,
        model: str,
        prompt: str,
        max_output_tokens: int,
    ) -> str:
        """Generate text with the chat completions API."""
        params = self._build_params(model, prompt, max_output_tokens)

        try:
            response = await self.client.chat.completions.create(**params)
        except OpenAIRateLimitError as e:
            retry_after = e.response.headers.get("retry-after") if e.response else None
            raise RateLimitError(
                str(e),
                provider=self.provider,
                retry_after=float(retry_after) if retry_after else None,
            ) from e
        except OpenAIAuthenticationError as e:
            raise AuthenticationError(str(e), provider=self.provider) from e
        except APIStatusError as e:
            if e.status_code == 400 and "content_policy" in str(e).lower():
                raise ContentPolicyError(str(e), provider=self.provider) from e
            raise ProviderError(
                str(e),
                provider=self.provider,
                status_code=e.status_code,
                retryable=e.status_code >= 500,
            ) from e
        except APIError as e:
            # Connection failures and timeouts carry no status code
            raise ProviderError(str(e), provider=self.provider, retryable=True) from e

        if not response.choices:
            raise ProviderError("Empty response from provider", provider=self.provider)

        choice = response.choices[0]
        if choice.finish_reason == "content_filter":
            raise ContentPolicyError(
                "Response blocked by content filter",
                provider=self.provider,
            )
        return choice.message.content or ""


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek through its OpenAI-compatible endpoint."""

    provider = ModelProvider.DEEPSEEK
    default_base_url = "https://api.deepseek.com"


class XAIProvider(OpenAIProvider):
    """xAI Grok through its OpenAI-compatible endpoint."""

    provider = ModelProvider.XAI
    default_base_url = "https://api.x.ai/v1"


class PerplexityProvider(OpenAIProvider):
    """Perplexity through its OpenAI-compatible endpoint."""

    provider = ModelProvider.PERPLEXITY
    default_base_url = "https://api.perplexity.ai"
