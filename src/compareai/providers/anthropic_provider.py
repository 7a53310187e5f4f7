"""
Anthropic provider implementation for Claude models.
"""

from __future__ import annotations

from typing import Any

from anthropic import (
    APIError,
    APIStatusError,
    AsyncAnthropic,
    AuthenticationError as AnthropicAuthenticationError,
    RateLimitError as AnthropicRateLimitError,
)

from compareai.core.models import ModelProvider
from compareai.providers.base import (
    AuthenticationError,
    BaseProvider,
    ContentPolicyError,
    ProviderError,
    RateLimitError,
)


class AnthropicProvider(BaseProvider):
    """Anthropic provider for Claude models."""

    provider = ModelProvider.ANTHROPIC

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(api_key, **kwargs)
        self.client = AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
        )

    async def invoke(
        self,
        model: str,
        prompt: str,
        max_output_tokens: int,
    ) -> str:
        """Generate text using the Messages API."""
        try:
            response = await self.client.messages.create(
                model=model,
                max_tokens=max_output_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except AnthropicRateLimitError as e:
            raise RateLimitError(str(e), provider=self.provider) from e
        except AnthropicAuthenticationError as e:
            raise AuthenticationError(str(e), provider=self.provider) from e
        except APIStatusError as e:
            raise ProviderError(
                str(e),
                provider=self.provider,
                status_code=e.status_code,
                retryable=e.status_code >= 500,
            ) from e
        except APIError as e:
            raise ProviderError(str(e), provider=self.provider, retryable=True) from e

        if response.stop_reason == "refusal":
            raise ContentPolicyError("Claude declined the prompt", provider=self.provider)

        # Extract text content from response
        content = ""
        for block in response.content:
            if hasattr(block, "text"):
                content += block.text
        return content
