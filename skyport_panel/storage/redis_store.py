"""Redis async key-value store for node records and the registry index."""

import json
from typing import Any, Optional

import structlog
from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from skyport_panel.errors import StoreError
from skyport_panel.storage.base import KeyValueStore

logger = structlog.get_logger(__name__)


class RedisStore(KeyValueStore):
    """Async Redis-backed store.

    Provides:
    - Async Redis connection
    - JSON serialization/deserialization
    - Health checks

    Keys never expire; node records and the index live until deleted.
    Backend failures are logged and re-raised as ``StoreError`` so they
    surface to the caller instead of being mistaken for a missing key.

    Attributes:
        url: Redis connection URL
        client: Redis async client
    """

    def __init__(self, url: str = "redis://localhost:6379/0") -> None:
        """Initialize Redis client.

        Args:
            url: Redis connection URL.
        """
        self.url = url
        self.client: Optional[Redis] = None
        self._is_connected = False

    async def connect(self) -> None:
        """Establish Redis connection.

        Raises:
            StoreError: If connection fails.
        """
        try:
            self.client = from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True,
            )

            # Test connection
            await self.client.ping()
            self._is_connected = True

            await logger.ainfo("redis_connected", url=self.url)

        except RedisError as exc:
            await logger.aerror(
                "redis_connection_failed",
                error=str(exc),
                url=self.url,
            )
            raise StoreError(f"Cannot connect to {self.url}: {exc}") from exc

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if not self.client:
            return

        await self.client.aclose()
        self._is_connected = False
        await logger.ainfo("redis_disconnected")

    def _require_client(self) -> Redis:
        if not self.client:
            raise RuntimeError("Redis not connected. Call connect() first.")
        return self.client

    async def set(self, key: str, value: Any) -> None:
        """Set a key-value pair in Redis.

        Args:
            key: Redis key.
            value: Value to store (JSON serialized).

        Raises:
            RuntimeError: If not connected.
            StoreError: If the write fails.
        """
        client = self._require_client()

        try:
            await client.set(key, json.dumps(value))
            await logger.adebug("redis_set", key=key)

        except RedisError as exc:
            await logger.aerror("redis_set_failed", key=key, error=str(exc))
            raise StoreError(str(exc), key=key) from exc

    async def get(self, key: str) -> Optional[Any]:
        """Get a value from Redis.

        Args:
            key: Redis key.

        Returns:
            Deserialized value if found, None otherwise.

        Raises:
            RuntimeError: If not connected.
            StoreError: If the read fails or the value is not JSON.
        """
        client = self._require_client()

        try:
            value = await client.get(key)
        except RedisError as exc:
            await logger.aerror("redis_get_failed", key=key, error=str(exc))
            raise StoreError(str(exc), key=key) from exc

        if value is None:
            return None

        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            await logger.aerror("redis_decode_failed", key=key, error=str(exc))
            raise StoreError(f"Value under {key!r} is not JSON", key=key) from exc

    async def delete(self, key: str) -> bool:
        """Delete a key from Redis.

        Returns:
            True if key was deleted, False if not found.

        Raises:
            RuntimeError: If not connected.
            StoreError: If the delete fails.
        """
        client = self._require_client()

        try:
            result = await client.delete(key)
            return result > 0

        except RedisError as exc:
            await logger.aerror("redis_delete_failed", key=key, error=str(exc))
            raise StoreError(str(exc), key=key) from exc

    async def health_check(self) -> bool:
        """Check Redis connection health."""
        if not self.client or not self._is_connected:
            return False

        try:
            await self.client.ping()
            return True
        except RedisError:
            self._is_connected = False
            return False
