"""
Prediction Cache Module

In-memory cache of prediction results. Staleness is tracked with a single
"last update" timestamp for the whole cache: once the refresh interval has
elapsed every entry is dropped together.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple, TypeVar

from brain_analytics.config import DEFAULT_CACHE_REFRESH_INTERVAL_MS

logger = logging.getLogger(__name__)

T = TypeVar("T")

CacheKey = Tuple[Hashable, ...]


class PredictionCache:
    """
    Thread-safe result cache with a global refresh window.

    The lock guards the map and the timestamp only; values are computed
    outside it, so two threads racing on the same key may both compute.

    Args:
        refresh_interval_seconds: Lifetime of the cache contents
        clock: Monotonic clock in seconds
    """

    def __init__(
        self,
        refresh_interval_seconds: float = DEFAULT_CACHE_REFRESH_INTERVAL_MS / 1000.0,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.refresh_interval_seconds = refresh_interval_seconds
        self._clock = clock or time.monotonic
        self._entries: Dict[CacheKey, Any] = {}
        self._last_update: Optional[float] = None
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(prediction_type: str, user_id: str, *params: Hashable) -> CacheKey:
        """Build a key from the prediction type, user and type-specific parameters."""
        return (prediction_type, user_id) + tuple(params)

    @property
    def last_update(self) -> Optional[float]:
        return self._last_update

    def _is_stale(self, now: float) -> bool:
        return (
            self._last_update is not None
            and now - self._last_update >= self.refresh_interval_seconds
        )

    def _flush_if_stale(self, now: float) -> None:
        if self._is_stale(now):
            logger.info(f"Prediction cache expired, dropping {len(self._entries)} entries")
            self._entries.clear()
            self._last_update = None

    def get(self, key: CacheKey) -> Optional[Any]:
        """Get a cached value, or None when missing or stale."""
        with self._lock:
            self._flush_if_stale(self._clock())
            value = self._entries.get(key)
            if value is not None:
                self._hits += 1
                logger.debug(f"Prediction cache hit: {key}")
                return value
            self._misses += 1
            return None

    def set(self, key: CacheKey, value: Any) -> None:
        """Store a value. The first store after a flush starts a new refresh window."""
        with self._lock:
            now = self._clock()
            self._flush_if_stale(now)
            if self._last_update is None:
                self._last_update = now
            self._entries[key] = value

    def get_or_compute(
        self,
        key: CacheKey,
        compute: Callable[[], T],
        should_store: Callable[[T], bool] = lambda value: True,
    ) -> T:
        """
        Return the cached value for `key`, computing and storing it on a miss.

        Values rejected by `should_store` are returned but not cached.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        value = compute()
        if value is not None and should_store(value):
            self.set(key, value)
        return value

    def invalidate(self, key: CacheKey) -> bool:
        """Invalidate a specific cache entry."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate_user(self, user_id: str) -> int:
        """Drop every entry for a user. Returns the number removed."""
        with self._lock:
            keys = [k for k in self._entries if len(k) > 1 and k[1] == user_id]
            for key in keys:
                del self._entries[key]
            return len(keys)

    def mark_stale(self) -> None:
        """Move the last update back past the refresh interval."""
        with self._lock:
            if self._last_update is not None:
                self._last_update = self._clock() - self.refresh_interval_seconds

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._entries.clear()
            self._last_update = None
            logger.info("Prediction cache cleared")

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"hits": self._hits, "misses": self._misses, "size": len(self._entries)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

