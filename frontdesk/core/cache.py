"""
Caching System

Short-lived cache backends for the room list. The cache object is passed
to the room registry explicitly; every registry write clears it.

Values handed to a backend must be JSON serializable so that the Redis
backend and the in-memory backend behave the same way.
"""

import fnmatch
import json
import threading
import time
from typing import Any, Dict, Optional, Tuple

import redis

from frontdesk.config.logging import get_logger
from frontdesk.config.settings import settings

logger = get_logger(__name__)


class CacheBackend:
    """Abstract cache backend interface"""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def clear(self, pattern: str = "*") -> int:
        raise NotImplementedError


class NullCache(CacheBackend):
    """Cache that never stores anything. Used by tests and CACHE_BACKEND=none."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        return False

    def delete(self, key: str) -> bool:
        return False

    def clear(self, pattern: str = "*") -> int:
        return 0


class InMemoryCache(CacheBackend):
    """In-process TTL cache guarded by a lock"""

    def __init__(self, default_ttl: int = 5, clock=time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._cache: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            value, expires = entry
            if expires is not None and self._clock() >= expires:
                del self._cache[key]
                return None

            return value

    def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        ttl = expire if expire is not None else self.default_ttl
        with self._lock:
            expires = self._clock() + ttl if ttl else None
            self._cache[key] = (value, expires)
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self, pattern: str = "*") -> int:
        with self._lock:
            if pattern == "*":
                count = len(self._cache)
                self._cache.clear()
                return count

            matching_keys = [key for key in self._cache if fnmatch.fnmatch(key, pattern)]
            for key in matching_keys:
                del self._cache[key]
            return len(matching_keys)


class RedisCache(CacheBackend):
    """Redis cache backend storing JSON payloads under a key prefix"""

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        default_ttl: int = 5,
        prefix: str = "frontdesk:",
    ):
        self.redis = client or redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
        self.default_ttl = default_ttl
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.redis.get(self._key(key))
        except redis.RedisError as e:
            logger.error(f"Cache get failed for key '{key}': {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Discarding undecodable cache value for key '{key}'")
            return None

    def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        ttl = expire if expire is not None else self.default_ttl
        try:
            self.redis.set(self._key(key), json.dumps(value, default=str), ex=ttl or None)
            return True
        except redis.RedisError as e:
            logger.error(f"Cache set failed for key '{key}': {e}")
            return False

    def delete(self, key: str) -> bool:
        try:
            return self.redis.delete(self._key(key)) > 0
        except redis.RedisError as e:
            logger.error(f"Cache delete failed for key '{key}': {e}")
            return False

    def clear(self, pattern: str = "*") -> int:
        # A failed invalidation would leave stale occupancy visible, so it propagates.
        keys = list(self.redis.scan_iter(match=self._key(pattern)))
        if keys:
            return self.redis.delete(*keys)
        return 0


def build_room_list_cache() -> CacheBackend:
    """Create the cache backend selected by CACHE_BACKEND."""
    if settings.CACHE_BACKEND == "redis":
        logger.info("Room list cache using redis backend")
        return RedisCache(default_ttl=settings.ROOM_LIST_CACHE_TTL)
    if settings.CACHE_BACKEND == "none":
        return NullCache()
    return InMemoryCache(default_ttl=settings.ROOM_LIST_CACHE_TTL)
