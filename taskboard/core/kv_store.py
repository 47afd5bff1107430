"""Key-value stores backing the project registry.

The registry only needs string values under string keys, loaded at startup and
rewritten on change. Read failures return None and write failures return False
so that persistence problems never reach the board.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol

from redis.asyncio import Redis
from redis.exceptions import RedisError

from taskboard.core.config import Constants, Settings


logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal async key-value interface used by the project registry."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> bool: ...


class InMemoryKeyValueStore:
    """Process-local store, used when nothing should outlive the session."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize in-memory store."""
        self._data: dict[str, str] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        async with self._lock:
            return self._data.get(key)

    async def set(self, key: str, value: str) -> bool:
        async with self._lock:
            self._data[key] = value
            logger.debug("Stored key: %s", key)
            return True


class JsonFileKeyValueStore:
    """All keys kept in a single JSON document on disk.

    Each value is stored as the JSON-encoded string handed in by the caller,
    mirroring browser local storage.
    """

    def __init__(self, path: Path) -> None:
        """Initialize file store.

        Args:
            path: Location of the JSON document (created on first write)
        """
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self._path}")
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        tmp_path.replace(self._path)

    async def get(self, key: str) -> str | None:
        """Get value from the document.

        Returns:
            Stored value, or None if missing or the file is unreadable
        """
        async with self._lock:
            try:
                value = (await asyncio.to_thread(self._read_all)).get(key)
            except (OSError, ValueError) as e:
                logger.warning("Failed to read %s from %s: %s", key, self._path, e)
                return None
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> bool:
        """Rewrite the document with the key updated.

        An unreadable document is replaced rather than kept.

        Returns:
            True if successful, False otherwise
        """
        async with self._lock:
            try:
                data = await asyncio.to_thread(self._read_all)
            except (OSError, ValueError) as e:
                logger.warning("Discarding unreadable store %s: %s", self._path, e)
                data = {}
            data[key] = value
            try:
                await asyncio.to_thread(self._write_all, data)
            except OSError as e:
                logger.warning("Failed to write %s to %s: %s", key, self._path, e)
                return False
        logger.debug("Stored key: %s in %s", key, self._path)
        return True


class RedisKeyValueStore:
    """Async Redis-backed store with namespaced keys."""

    def __init__(self, client: Redis, *, prefix: str = Constants.REDIS_KEY_PREFIX) -> None:
        """Initialize Redis store.

        Args:
            client: redis.asyncio client (decode_responses=True expected)
            prefix: Namespace prepended to every key
        """
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str) -> "RedisKeyValueStore":
        client = Redis.from_url(url, decode_responses=True)
        logger.info("Redis key-value store initialized with URL: %s", url)
        return cls(client)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        """Get value from Redis.

        Returns:
            Stored value or None if not found or error occurred
        """
        try:
            value = await self._client.get(self._key(key))
        except RedisError as e:
            logger.warning("Redis GET error for key %s: %s", key, e)
            return None
        if isinstance(value, bytes):
            return value.decode()
        return value

    async def set(self, key: str, value: str) -> bool:
        """Set value in Redis without expiry.

        Returns:
            True if successful, False otherwise
        """
        try:
            await self._client.set(self._key(key), value)
        except RedisError as e:
            logger.warning("Redis SET error for key %s: %s", key, e)
            return False
        logger.debug("Stored key: %s", key)
        return True

    async def close(self) -> None:
        """Close Redis connection."""
        await self._client.aclose()
        logger.info("Redis client closed")


def build_key_value_store(settings: Settings) -> KeyValueStore:
    """Pick the registry store: Redis when configured, otherwise the JSON file."""
    if settings.redis_url:
        return RedisKeyValueStore.from_url(settings.redis_url)
    logger.info("Redis URL not configured. Persisting projects to %s", settings.projects_store_path)
    return JsonFileKeyValueStore(settings.projects_store_path)
