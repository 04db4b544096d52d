"""
Storage layer for paste records: a Redis-backed store with an in-memory
fallback for development and tests.

Both stores expose the same small set of atomic primitives the paste
manager relies on: multi-field write, read-all-fields, atomic increment
and ping.
"""
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, Optional

from redis import Redis
from redis.exceptions import RedisError

from pastebin.config import Settings
from pastebin.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)


class PasteStore(ABC):
    """Storage engine interface used by the paste manager."""

    @abstractmethod
    def write_fields(
        self, key: str, mapping: Dict[str, str], ttl_seconds: Optional[int] = None
    ) -> None:
        """
        Atomically write all fields of a hash.

        Args:
            key: Hash key
            mapping: Field values, all written together or not at all
            ttl_seconds: Optional key expiration, applied in the same transaction
        """

    @abstractmethod
    def read_all_fields(self, key: str) -> Dict[str, str]:
        """Return every field of a hash, or an empty dict if the key is missing."""

    @abstractmethod
    def increment(self, key: str, ttl_seconds: Optional[int] = None) -> int:
        """
        Atomically increment a counter and return the new value.

        A missing counter starts at 0.
        """

    @abstractmethod
    def ping(self) -> bool:
        """Liveness probe. Raises StorageUnavailable if the engine is unreachable."""

    def close(self) -> None:
        """Release any connection held by the store."""


class InMemoryStore(PasteStore):
    """Simple in-memory store for development/testing (when Redis unavailable)."""

    def __init__(self):
        self.store: Dict[str, object] = {}
        self.ttl_timestamps: Dict[str, float] = {}
        self._lock = threading.Lock()

    def write_fields(self, key, mapping, ttl_seconds=None):
        with self._lock:
            self.store[key] = {field: str(value) for field, value in mapping.items()}
            self._set_expiry(key, ttl_seconds)

    def read_all_fields(self, key):
        with self._lock:
            if not self._is_live(key):
                return {}
            return dict(self.store[key])

    def increment(self, key, ttl_seconds=None):
        with self._lock:
            current = int(self.store[key]) if self._is_live(key) else 0
            self.store[key] = current + 1
            self._set_expiry(key, ttl_seconds)
            return current + 1

    def ping(self):
        return True

    def _set_expiry(self, key: str, ttl_seconds: Optional[int]):
        if ttl_seconds:
            self.ttl_timestamps[key] = self._now_ms() + ttl_seconds * 1000

    def _is_live(self, key: str) -> bool:
        """Drop the key if its expiry has passed. Caller holds the lock."""
        if key not in self.store:
            return False
        expires = self.ttl_timestamps.get(key)
        if expires is not None and self._now_ms() > expires:
            del self.store[key]
            del self.ttl_timestamps[key]
            return False
        return True

    @staticmethod
    def _now_ms() -> float:
        return datetime.now(timezone.utc).timestamp() * 1000


class RedisStore(PasteStore):
    """Wrapper for Redis operations on pastes."""

    def __init__(self, url: str, socket_timeout: Optional[float] = None):
        # For Upstash Redis, use rediss:// scheme for SSL/TLS
        self.redis = Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )

    def write_fields(self, key, mapping, ttl_seconds=None):
        try:
            # MULTI/EXEC so readers never see a record without its policy fields
            pipe = self.redis.pipeline(transaction=True)
            pipe.hset(key, mapping=mapping)
            if ttl_seconds:
                pipe.expire(key, ttl_seconds)
            pipe.execute()
        except RedisError as e:
            logger.error(f"Error writing {key}: {type(e).__name__}: {e}")
            raise StorageUnavailable(f"write failed for {key}") from e

    def read_all_fields(self, key):
        try:
            return self.redis.hgetall(key)
        except RedisError as e:
            logger.error(f"Error reading {key}: {type(e).__name__}: {e}")
            raise StorageUnavailable(f"read failed for {key}") from e

    def increment(self, key, ttl_seconds=None):
        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.incr(key)
            if ttl_seconds:
                pipe.expire(key, ttl_seconds)
            return int(pipe.execute()[0])
        except RedisError as e:
            logger.error(f"Error incrementing {key}: {type(e).__name__}: {e}")
            raise StorageUnavailable(f"increment failed for {key}") from e

    def ping(self):
        try:
            return bool(self.redis.ping())
        except RedisError as e:
            raise StorageUnavailable(f"ping failed: {type(e).__name__}: {e}") from e

    def close(self):
        self.redis.close()


def connect_store(config: Settings) -> PasteStore:
    """
    Open the storage engine described by the settings.

    Falls back to an in-memory store when Redis cannot be reached and
    MEMORY_FALLBACK is enabled; otherwise the connection error propagates.
    """
    logger.info(f"Attempting to connect to Redis: {config.REDIS_URL[:30]}...")
    store = RedisStore(config.REDIS_URL, socket_timeout=config.REDIS_SOCKET_TIMEOUT)
    try:
        store.ping()
    except StorageUnavailable as e:
        store.close()
        if not config.MEMORY_FALLBACK:
            raise
        logger.error(f"Could not connect to Redis: {e}")
        logger.warning("Using in-memory fallback. Data will NOT persist across restarts.")
        return InMemoryStore()
    logger.info("Redis connected successfully")
    return store
