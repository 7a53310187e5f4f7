"""
Key-value stores backing the prompt history.

All stores hold opaque string values. ``RedisStore`` wraps a redis-py
client, ``FileStore`` keeps a JSON file for single-user CLI use, and
``InMemoryStore`` is the default when neither is configured.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog

from compareai.core.config import RedisSettings

logger = structlog.get_logger()


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal get/set/delete storage capability."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStore:
    """Process-local store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore:
    """Store persisted as a single JSON object on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Failed to read history file", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)


class RedisStore:
    """Store backed by a Redis server."""

    def __init__(self, client: Any, prefix: str = "compareai:"):
        self._redis = client
        self._prefix = prefix

    @classmethod
    def from_settings(cls, settings: RedisSettings) -> "RedisStore":
        """Create a store from Redis settings and verify the connection."""
        import redis

        if settings.url:
            client = redis.from_url(settings.url, decode_responses=True)
        else:
            client = redis.Redis(
                host=settings.host,
                port=settings.port,
                password=settings.password.get_secret_value() if settings.password else None,
                db=settings.db,
                ssl=settings.ssl,
                socket_timeout=settings.socket_timeout,
                decode_responses=True,
            )
        client.ping()
        return cls(client)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> str | None:
        value = self._redis.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        self._redis.set(self._key(key), value)

    def delete(self, key: str) -> None:
        self._redis.delete(self._key(key))


def create_store(
    settings: RedisSettings | None = None,
    path: str | Path | None = None,
) -> KeyValueStore:
    """
    Pick a store for the prompt history.

    Uses Redis when configured and reachable, then a JSON file when ``path``
    is given, otherwise an in-memory store.
    """
    fallback: KeyValueStore = FileStore(path) if path is not None else InMemoryStore()

    if settings is None or not settings.is_configured:
        return fallback

    try:
        store = RedisStore.from_settings(settings)
    except Exception as e:
        logger.warning(
            "Redis connection failed, using local history",
            store=type(fallback).__name__,
            error=str(e),
        )
        return fallback

    logger.info("Redis history store connected")
    return store
