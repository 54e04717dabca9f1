"""In-memory bounded cache with TTL expiration.

Process-level cache for place search results, shared by every provider in
the process. Entries expire lazily: staleness is only checked on ``get``,
there is no background sweep. When full, the entry with the oldest
insertion time is evicted (reads do not refresh it, so this is not LRU).
Defaults: 100 entries, 1 hour TTL.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Sequence, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_SECONDS = 3600.0


@dataclass
class _CacheEntry(Generic[V]):
    results: list[V]
    inserted_at: float


class ExpiringBoundedCache(Generic[K, V]):
    """Thread-safe TTL cache mapping a key to a list of results.

    Every operation runs under one lock, so a ``get`` that evicts an
    expired entry is atomic with respect to concurrent ``set``/``clear``.

    Eviction tie-break: when several entries share the oldest timestamp,
    the one inserted into the cache first (dict iteration order) goes.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            logger.warning(f"[CACHE] max_size={max_size} is below 1, clamping to 1")
            max_size = 1
        if ttl_seconds < 0:
            logger.warning(f"[CACHE] ttl_seconds={ttl_seconds} is negative, clamping to 0")
            ttl_seconds = 0.0
        self._cache: dict[K, _CacheEntry[V]] = {}
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: K) -> list[V] | None:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if self._clock() - entry.inserted_at > self._ttl:
                del self._cache[key]
                logger.debug(f"[CACHE] Expired entry removed ({len(self._cache)} left)")
                return None
            return list(entry.results)

    def set(self, key: K, results: Sequence[V]) -> None:
        with self._lock:
            if key not in self._cache and len(self._cache) >= self._max_size:
                self._evict_oldest()
            self._cache[key] = _CacheEntry(results=list(results), inserted_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def _evict_oldest(self) -> None:
        # Caller holds the lock. min() keeps the first of equal timestamps.
        if not self._cache:
            return
        oldest_key = min(self._cache, key=lambda k: self._cache[k].inserted_at)
        del self._cache[oldest_key]
        logger.debug("[CACHE] Cache full, evicted oldest entry")
