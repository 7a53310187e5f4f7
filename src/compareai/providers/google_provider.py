"""
Google provider implementation for Gemini models.
"""

from __future__ import annotations

from typing import Any

import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from compareai.core.models import ModelProvider
from compareai.providers.base import (
    AuthenticationError,
    BaseProvider,
    ContentPolicyError,
    ProviderError,
    RateLimitError,
)


class GoogleProvider(BaseProvider):
    """Google provider for Gemini models."""

    provider = ModelProvider.GOOGLE

    def __init__(self, api_key: str | None = None, **kwargs: Any):
        super().__init__(api_key, **kwargs)

        if api_key:
            genai.configure(api_key=api_key)

        self._models: dict[str, genai.GenerativeModel] = {}

    def _get_model(self, model_id: str) -> genai.GenerativeModel:
        """Get or create a GenerativeModel instance."""
        if model_id not in self._models:
            self._models[model_id] = genai.GenerativeModel(model_id)
        return self._models[model_id]

    async def invoke(
        self,
        model: str,
        prompt: str,
        max_output_tokens: int,
    ) -> str:
        """Generate text using Gemini."""
        try:
            response = await self._get_model(model).generate_content_async(
                prompt,
                generation_config=GenerationConfig(max_output_tokens=max_output_tokens),
            )
        except Exception as e:
            # The SDK surfaces google.api_core exceptions; classify by message
            error_str = str(e).lower()
            if "rate" in error_str or "quota" in error_str:
                raise RateLimitError(str(e), provider=self.provider) from e
            if "auth" in error_str or "api key" in error_str:
                raise AuthenticationError(str(e), provider=self.provider) from e
            raise ProviderError(str(e), provider=self.provider) from e

        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            raise ContentPolicyError(
                f"Prompt blocked: {feedback.block_reason}",
                provider=self.provider,
            )

        try:
            return response.text
        except ValueError as e:
            # .text raises when the candidate was stopped by a safety filter
            raise ContentPolicyError(str(e), provider=self.provider) from e
