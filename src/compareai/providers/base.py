"""
Base provider interface for AI models.

Every provider adapter turns a uniform ``invoke(model, prompt,
max_output_tokens)`` call into its vendor's request and returns plain text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from compareai.core.models import ModelProvider


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(
        self,
        message: str,
        provider: ModelProvider | None = None,
        status_code: int | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.retryable = retryable


class RateLimitError(ProviderError):
    """Raised when rate limit or quota is exceeded."""

    def __init__(
        self,
        message: str,
        provider: ModelProvider | None = None,
        retry_after: float | None = None,
    ):
        super().__init__(message, provider, status_code=429, retryable=True)
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Raised when authentication fails."""

    def __init__(self, message: str, provider: ModelProvider | None = None):
        super().__init__(message, provider, status_code=401, retryable=False)


class ContentPolicyError(ProviderError):
    """Raised when the provider refuses the prompt on content-policy grounds."""

    def __init__(self, message: str, provider: ModelProvider | None = None):
        super().__init__(message, provider, status_code=400, retryable=False)


class BaseProvider(ABC):
    """
    Abstract base class for AI model providers.

    Subclasses set ``provider`` and implement ``invoke()``.
    """

    provider: ModelProvider

    def __init__(self, api_key: str | None = None, **kwargs: Any):
        """Initialize the provider with optional API key."""
        self.api_key = api_key

    @abstractmethod
    async def invoke(
        self,
        model: str,
        prompt: str,
        max_output_tokens: int,
    ) -> str:
        """
        Generate text for a single prompt.

        Args:
            model: Vendor-side model name
            prompt: The user prompt
            max_output_tokens: Upper bound on generated tokens

        Returns:
            The generated text

        Raises:
            ProviderError: On quota, auth, network or content-policy failure
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider.value!r})"
