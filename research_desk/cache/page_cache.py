"""Rendered page cache keyed by request path."""

from __future__ import annotations

from typing import Optional

import structlog
from redis.exceptions import RedisError

from ..config import get_settings
from .redis_client import RedisManager, get_redis_manager

logger = structlog.get_logger(__name__)

KEY_PREFIX = "page:"


def research_page_path(session_id: str) -> str:
    """Path of a research session's dashboard page."""
    return f"/dashboard/research/{session_id}"


class PageCache:
    """Stores rendered HTML per path.

    Without a Redis manager every lookup misses and every write is dropped,
    so pages are simply rendered on each request. Redis failures are logged
    and treated the same way.
    """

    def __init__(self, redis_manager: Optional[RedisManager], ttl_seconds: int = 300):
        self.redis = redis_manager
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _key(path: str) -> str:
        return f"{KEY_PREFIX}{path}"

    async def get(self, path: str) -> Optional[str]:
        if self.redis is None:
            return None
        try:
            return await self.redis.get(self._key(path))
        except RedisError as exc:
            logger.warning("page_cache_read_failed", path=path, error=str(exc))
            return None

    async def set(self, path: str, html: str) -> None:
        if self.redis is None:
            return
        try:
            await self.redis.set(self._key(path), html, expire=self.ttl_seconds)
        except RedisError as exc:
            logger.warning("page_cache_write_failed", path=path, error=str(exc))

    async def invalidate(self, path: str) -> None:
        """Drop the cached rendering of ``path`` so the next view re-renders it."""
        if self.redis is None:
            return
        try:
            await self.redis.delete(self._key(path))
        except RedisError as exc:
            logger.warning("page_cache_invalidate_failed", path=path, error=str(exc))
            return
        logger.debug("page_cache_invalidated", path=path)


def get_page_cache() -> PageCache:
    """FastAPI dependency returning a page cache bound to the global Redis manager."""
    return PageCache(get_redis_manager(), ttl_seconds=get_settings().page_cache_ttl_seconds)
