"""Redis client management."""

from __future__ import annotations

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError


class RedisManager:
    """Manages a pooled Redis connection."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        decode_responses: bool = True,
        max_connections: int = 20,
        socket_connect_timeout: int = 5,
    ):
        """Initialize the Redis manager with connection pooling.

        Args:
            host: Redis host
            port: Redis port
            db: Redis database number
            password: Redis password (if required)
            decode_responses: Whether to decode responses as strings
            max_connections: Maximum number of connections in the pool
            socket_connect_timeout: Socket connection timeout in seconds
        """
        self.host = host
        self.port = port
        self.db = db
        self._pool: Optional[redis.ConnectionPool] = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            decode_responses=decode_responses,
            max_connections=max_connections,
            socket_connect_timeout=socket_connect_timeout,
        )
        self._client: Optional[redis.Redis] = None

    @property
    def client(self) -> redis.Redis:
        """Get or create the Redis client."""
        if self._client is None:
            self._client = redis.Redis(connection_pool=self._pool)
        return self._client

    async def ping(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if Redis responds to ping, False otherwise
        """
        try:
            return await self.client.ping()
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        """Close the client and its connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

    async def get(self, key: str) -> Optional[str]:
        """Get a value from cache."""
        value = await self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, expire: Optional[int] = None) -> bool:
        """Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            expire: Expiration time in seconds

        Returns:
            True if successful
        """
        return bool(await self.client.set(key, value, ex=expire))

    async def delete(self, *keys: str) -> int:
        """Delete keys from cache.

        Returns:
            Number of keys deleted
        """
        if not keys:
            return 0
        return await self.client.delete(*keys)


# Global Redis manager instance
_redis_manager: Optional[RedisManager] = None


def init_redis(
    host: str = "localhost",
    port: int = 6379,
    db: int = 0,
    password: Optional[str] = None,
) -> RedisManager:
    """Initialize the global Redis manager."""
    global _redis_manager
    _redis_manager = RedisManager(host, port, db, password)
    return _redis_manager


def get_redis_manager() -> Optional[RedisManager]:
    """Get the global Redis manager instance, or None if Redis is disabled."""
    return _redis_manager


async def close_redis() -> None:
    """Close and forget the global Redis manager."""
    global _redis_manager
    if _redis_manager is not None:
        await _redis_manager.close()
        _redis_manager = None
