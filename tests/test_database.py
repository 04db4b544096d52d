"""
Unit tests for the storage layer.
"""
from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from pastebin.config import Settings
from pastebin.database import InMemoryStore, RedisStore, connect_store
from pastebin.exceptions import StorageUnavailable


class TestInMemoryStore:
    """Test cases for InMemoryStore."""

    def test_read_missing_key(self):
        assert InMemoryStore().read_all_fields("paste:missing") == {}

    def test_write_then_read(self):
        store = InMemoryStore()
        store.write_fields("paste:a", {"content": "hi", "max_views": 3})

        assert store.read_all_fields("paste:a") == {"content": "hi", "max_views": "3"}

    def test_read_returns_copy(self):
        store = InMemoryStore()
        store.write_fields("paste:a", {"content": "hi"})

        store.read_all_fields("paste:a")["content"] = "changed"
        assert store.read_all_fields("paste:a")["content"] == "hi"

    def test_increment_starts_at_zero(self):
        store = InMemoryStore()

        assert store.increment("paste:a:views") == 1
        assert store.increment("paste:a:views") == 2

    def test_key_expiry(self):
        store = InMemoryStore()
        with patch.object(InMemoryStore, "_now_ms", return_value=1_000_000):
            store.write_fields("paste:a", {"content": "hi"}, ttl_seconds=10)
        with patch.object(InMemoryStore, "_now_ms", return_value=1_010_000):
            assert store.read_all_fields("paste:a") == {"content": "hi"}
        with patch.object(InMemoryStore, "_now_ms", return_value=1_010_001):
            assert store.read_all_fields("paste:a") == {}
        assert "paste:a" not in store.store

    def test_expired_counter_restarts(self):
        store = InMemoryStore()
        with patch.object(InMemoryStore, "_now_ms", return_value=0):
            store.increment("paste:a:views", ttl_seconds=1)
            store.increment("paste:a:views", ttl_seconds=1)
        with patch.object(InMemoryStore, "_now_ms", return_value=5000):
            assert store.increment("paste:a:views") == 1

    def test_ping(self):
        assert InMemoryStore().ping() is True


@pytest.fixture
def mock_redis():
    """Patch the Redis client class used by RedisStore."""
    with patch("pastebin.database.Redis") as redis_cls:
        client = MagicMock()
        redis_cls.from_url.return_value = client
        yield client


class TestRedisStore:
    """Test cases for RedisStore against a mocked client."""

    def test_connects_with_decoded_responses(self):
        with patch("pastebin.database.Redis") as redis_cls:
            RedisStore("redis://example:6379", socket_timeout=2)

        redis_cls.from_url.assert_called_once_with(
            "redis://example:6379",
            decode_responses=True,
            socket_timeout=2,
            socket_connect_timeout=2,
        )

    def test_write_fields_is_transactional(self, mock_redis):
        pipe = mock_redis.pipeline.return_value
        store = RedisStore("redis://localhost:6379")

        store.write_fields("paste:a", {"content": "hi"}, ttl_seconds=30)

        mock_redis.pipeline.assert_called_once_with(transaction=True)
        pipe.hset.assert_called_once_with("paste:a", mapping={"content": "hi"})
        pipe.expire.assert_called_once_with("paste:a", 30)
        pipe.execute.assert_called_once()

    def test_write_fields_without_ttl(self, mock_redis):
        pipe = mock_redis.pipeline.return_value
        RedisStore("redis://localhost:6379").write_fields("paste:a", {"content": "hi"})

        pipe.expire.assert_not_called()

    def test_read_all_fields(self, mock_redis):
        mock_redis.hgetall.return_value = {"content": "hi"}

        assert RedisStore("redis://localhost:6379").read_all_fields("paste:a") == {"content": "hi"}
        mock_redis.hgetall.assert_called_once_with("paste:a")

    def test_increment_returns_new_value(self, mock_redis):
        pipe = mock_redis.pipeline.return_value
        pipe.execute.return_value = [4, True]

        assert RedisStore("redis://localhost:6379").increment("paste:a:views", ttl_seconds=5) == 4
        pipe.incr.assert_called_once_with("paste:a:views")
        pipe.expire.assert_called_once_with("paste:a:views", 5)

    def test_read_failure_raises_storage_unavailable(self, mock_redis):
        mock_redis.hgetall.side_effect = RedisConnectionError("refused")

        with pytest.raises(StorageUnavailable):
            RedisStore("redis://localhost:6379").read_all_fields("paste:a")

    def test_write_failure_raises_storage_unavailable(self, mock_redis):
        mock_redis.pipeline.return_value.execute.side_effect = RedisTimeoutError("slow")

        with pytest.raises(StorageUnavailable):
            RedisStore("redis://localhost:6379").write_fields("paste:a", {"content": "hi"})

    def test_increment_failure_raises_storage_unavailable(self, mock_redis):
        mock_redis.pipeline.return_value.execute.side_effect = RedisConnectionError("refused")

        with pytest.raises(StorageUnavailable):
            RedisStore("redis://localhost:6379").increment("paste:a:views")

    def test_ping_failure_raises_storage_unavailable(self, mock_redis):
        mock_redis.ping.side_effect = RedisConnectionError("refused")

        with pytest.raises(StorageUnavailable):
            RedisStore("redis://localhost:6379").ping()

    def test_close(self, mock_redis):
        RedisStore("redis://localhost:6379").close()

        mock_redis.close.assert_called_once()


class TestConnectStore:
    """Test cases for connect_store."""

    def test_returns_redis_store_when_reachable(self, mock_redis):
        mock_redis.ping.return_value = True

        assert isinstance(connect_store(Settings()), RedisStore)

    def test_falls_back_to_memory(self, mock_redis, monkeypatch):
        monkeypatch.setenv("MEMORY_FALLBACK", "true")
        mock_redis.ping.side_effect = RedisConnectionError("refused")

        assert isinstance(connect_store(Settings()), InMemoryStore)
        mock_redis.close.assert_called_once()

    def test_raises_without_fallback(self, mock_redis, monkeypatch):
        monkeypatch.setenv("MEMORY_FALLBACK", "false")
        mock_redis.ping.side_effect = RedisConnectionError("refused")

        with pytest.raises(StorageUnavailable):
            connect_store(Settings())
