"""Caching layer."""

from __future__ import annotations

from .page_cache import PageCache, get_page_cache, research_page_path
from .redis_client import RedisManager, close_redis, get_redis_manager, init_redis

__all__ = [
    "PageCache",
    "RedisManager",
    "close_redis",
    "get_page_cache",
    "get_redis_manager",
    "init_redis",
    "research_page_path",
]
