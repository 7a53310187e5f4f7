"""Recorders notified of every successful live generation."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()


@runtime_checkable
class HistoryRecorder(Protocol):
    """Best-effort sink for live generations."""

    async def record(self, prompt: str, model_id: str, text: str) -> None: ...


class LoggingHistoryRecorder:
    """Writes a log line per generation. No durable storage."""

    def __init__(self, preview_chars: int = 30):
        self.preview_chars = preview_chars

    async def record(self, prompt: str, model_id: str, text: str) -> None:
        logger.info(
            "Saving to history",
            model_id=model_id,
            prompt_preview=prompt[: self.preview_chars],
            response_chars=len(text),
        )


class NullHistoryRecorder:
    """Discards everything."""

    async def record(self, prompt: str, model_id: str, text: str) -> None:
        return None
