"""Request-level errors raised by the orchestrator."""

from __future__ import annotations


class CompareAIError(Exception):
    """Base exception for CompareAI."""


class InvalidRequest(CompareAIError):
    """Raised when a generation request is malformed or names no known model."""

    def __init__(self, message: str, model_ids: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.model_ids = list(model_ids or [])
