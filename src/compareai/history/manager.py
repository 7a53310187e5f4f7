"""
Bounded prompt history.

The history is a newest-first JSON list stored under one key. Saving beyond
the cap evicts the oldest entry.
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, field

import structlog

from compareai.history.store import KeyValueStore

logger = structlog.get_logger()

HISTORY_KEY = "ai-comparison-history"
MAX_HISTORY_ITEMS = 20


@dataclass
class HistoryItem:
    """One submitted prompt."""

    id: str
    prompt: str
    timestamp: int
    model_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["modelIds"] = data.pop("model_ids")
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryItem":
        return cls(
            id=str(data["id"]),
            prompt=str(data["prompt"]),
            timestamp=int(data["timestamp"]),
            model_ids=list(data.get("modelIds", [])),
        )


class PromptHistory:
    """
    Newest-first prompt history over a key-value store.

    Args:
        store: Backing store
        key: Storage key the serialized list lives under
        max_items: Cap on retained entries
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = HISTORY_KEY,
        max_items: int = MAX_HISTORY_ITEMS,
    ):
        if max_items <= 0:
            raise ValueError("max_items must be positive")
        self._store = store
        self.key = key
        self.max_items = max_items

    def save(self, prompt: str, model_ids: list[str]) -> HistoryItem:
        """Prepend a prompt to the history and return the new entry."""
        history = self.list()
        now_ms = time.time_ns() // 1_000_000

        # Millisecond ids can collide on rapid saves
        existing = {item.id for item in history}
        item_id = now_ms
        while str(item_id) in existing:
            item_id += 1

        item = HistoryItem(
            id=str(item_id),
            prompt=prompt,
            timestamp=now_ms,
            model_ids=list(model_ids),
        )
        history.insert(0, item)
        del history[self.max_items:]

        self._write(history)
        return item

    def list(self) -> list[HistoryItem]:
        """Return stored entries, newest first. Unreadable data reads as empty."""
        raw = self._store.get(self.key)
        if not raw:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("history is not a list")
            return [HistoryItem.from_dict(entry) for entry in data]
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Failed to parse history", key=self.key, error=str(e))
            return []

    def delete(self, item_id: str) -> bool:
        """Remove one entry. Returns True if it existed."""
        history = self.list()
        remaining = [item for item in history if item.id != item_id]
        self._write(remaining)
        return len(remaining) != len(history)

    def clear(self) -> None:
        self._store.delete(self.key)

    def _write(self, history: list[HistoryItem]) -> None:
        self._store.set(self.key, json.dumps([item.to_dict() for item in history]))
