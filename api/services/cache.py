"""Caching utilities for API responses."""

import threading
import time
from typing import Any
from collections import OrderedDict

from api.config import get_settings


class TTLCache:
    """Simple TTL cache with max size limit."""

    def __init__(self, maxsize: int = 128, ttl: int = 3600):
        """Initialize cache.

        Args:
            maxsize: Maximum number of items to cache
            ttl: Time-to-live in seconds
        """
        self.maxsize = maxsize
        self.ttl = ttl
        self._cache: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Get item from cache if not expired."""
        with self._lock:
            if key not in self._cache:
                return None

            timestamp, value = self._cache[key]
            if time.time() - timestamp > self.ttl:
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        """Set item in cache."""
        with self._lock:
            while len(self._cache) >= self.maxsize:
                self._cache.popitem(last=False)
            self._cache[key] = (time.time(), value)

    def clear(self) -> None:
        """Clear all cached items."""
        with self._lock:
            self._cache.clear()

    def invalidate(self, pattern: str) -> int:
        """Invalidate cache entries whose key contains ``pattern``.

        Returns:
            Number of entries invalidated
        """
        with self._lock:
            keys_to_remove = [k for k in self._cache if pattern in k]
            for key in keys_to_remove:
                del self._cache[key]
            return len(keys_to_remove)

    def __len__(self) -> int:
        return len(self._cache)


# Tab badge counts; invalidated on every listing or advisor write
counts_cache = TTLCache(maxsize=50, ttl=get_settings().cache_ttl_seconds)


def clear_all_caches() -> None:
    """Clear all cache instances."""
    counts_cache.clear()
