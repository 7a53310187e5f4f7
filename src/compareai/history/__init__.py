"""Prompt history and generation recording."""

from compareai.history.manager import HISTORY_KEY, MAX_HISTORY_ITEMS, HistoryItem, PromptHistory
from compareai.history.recorder import HistoryRecorder, LoggingHistoryRecorder, NullHistoryRecorder
from compareai.history.store import FileStore, InMemoryStore, KeyValueStore, RedisStore, create_store

__all__ = [
    "HISTORY_KEY",
    "MAX_HISTORY_ITEMS",
    "HistoryItem",
    "PromptHistory",
    "HistoryRecorder",
    "LoggingHistoryRecorder",
    "NullHistoryRecorder",
    "KeyValueStore",
    "InMemoryStore",
    "FileStore",
    "RedisStore",
    "create_store",
]
