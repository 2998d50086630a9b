"""
Concurrency-safe in-memory cache with lazy time-based expiry.

Expiry is checked on read only; there is no background eviction task.
Every operation runs under a single asyncio.Lock so writes to a key are
serialized and a reader never observes a half-replaced entry.
"""
import asyncio
import logging
import time
from typing import Callable, Dict, Generic, Optional, Set

from .types import (
    CacheEntry,
    TtlCacheConfig,
    TtlCacheEvent,
    TtlCacheEventListener,
    TtlCacheEventType,
    TtlCacheStats,
    THIRTY_DAYS_SECONDS,
    V,
)

logger = logging.getLogger("cache_ttl.cache")


DEFAULT_TTL_CONFIG = TtlCacheConfig(
    ttl_seconds=THIRTY_DAYS_SECONDS,
    clock=time.time,
)


def merge_ttl_config(config: Optional[TtlCacheConfig] = None) -> TtlCacheConfig:
    """Merge user config with defaults."""
    if config is None:
        return TtlCacheConfig(
            ttl_seconds=DEFAULT_TTL_CONFIG.ttl_seconds,
            clock=DEFAULT_TTL_CONFIG.clock,
        )

    if config.ttl_seconds is not None and config.ttl_seconds < 0:
        raise ValueError(f"ttl_seconds must be >= 0, got {config.ttl_seconds}")

    return TtlCacheConfig(
        ttl_seconds=config.ttl_seconds
        if config.ttl_seconds is not None
        else DEFAULT_TTL_CONFIG.ttl_seconds,
        clock=config.clock or DEFAULT_TTL_CONFIG.clock,
    )


class TtlCache(Generic[V]):
    """
    Key/value cache whose entries expire a fixed time after they are stored.

    Example:
        cache: TtlCache[str] = TtlCache(TtlCacheConfig(ttl_seconds=60))
        await cache.set("neko", "cat")
        await cache.get("neko")  # "cat"
    """

    def __init__(self, config: Optional[TtlCacheConfig] = None) -> None:
        self._config = merge_ttl_config(config)
        self._clock: Callable[[], float] = self._config.clock or time.time
        self._entries: Dict[str, CacheEntry[V]] = {}
        self._lock = asyncio.Lock()
        self._listeners: Set[TtlCacheEventListener] = set()
        self._hits = 0
        self._misses = 0
        self._expired = 0

    @property
    def ttl_seconds(self) -> float:
        return self._config.ttl_seconds

    def _is_expired(self, entry: CacheEntry[V], now: float) -> bool:
        return entry.age(now) > self._config.ttl_seconds

    async def get(self, key: str) -> Optional[V]:
        """
        Return the value stored for key, or None on a miss.

        An entry older than the TTL is deleted and reported as a miss.
        """
        async with self._lock:
            entry = self._entries.get(key)
            now = self._clock()

            if entry is None:
                self._misses += 1
                self._emit(TtlCacheEventType.CACHE_MISS, key, now)
                return None

            if self._is_expired(entry, now):
                del self._entries[key]
                self._expired += 1
                self._misses += 1
                logger.debug(f"TtlCache.get: expired key={key!r} age={entry.age(now):.1f}s")
                self._emit(
                    TtlCacheEventType.CACHE_EXPIRE,
                    key,
                    now,
                    {"age_seconds": entry.age(now)},
                )
                return None

            self._hits += 1
            self._emit(TtlCacheEventType.CACHE_HIT, key, now)
            return entry.value

    async def set(self, key: str, value: V) -> None:
        """Store value under key, replacing any existing entry."""
        async with self._lock:
            now = self._clock()
            self._entries[key] = CacheEntry(value=value, stored_at=now)
            self._emit(TtlCacheEventType.CACHE_STORE, key, now)

    async def remove(self, key: str) -> bool:
        """Remove key. Returns whether an entry was present."""
        async with self._lock:
            removed = self._entries.pop(key, None) is not None
            if removed:
                self._emit(TtlCacheEventType.CACHE_REMOVE, key, self._clock())
            return removed

    async def clear(self) -> None:
        """Remove every entry."""
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._emit(
                TtlCacheEventType.CACHE_CLEAR, None, self._clock(), {"removed": count}
            )

    async def size(self) -> int:
        """Number of stored entries, including ones not yet found expired."""
        async with self._lock:
            return len(self._entries)

    async def close(self) -> None:
        """Release entries and listeners."""
        async with self._lock:
            self._entries.clear()
        self._listeners.clear()

    def get_stats(self) -> TtlCacheStats:
        """Get cache counters."""
        return TtlCacheStats(
            entries=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            expired=self._expired,
        )

    def get_config(self) -> TtlCacheConfig:
        """Get configuration."""
        return self._config

    def on(self, listener: TtlCacheEventListener) -> Callable[[], None]:
        """Add event listener."""
        self._listeners.add(listener)
        return lambda: self._listeners.discard(listener)

    def off(self, listener: TtlCacheEventListener) -> None:
        """Remove event listener."""
        self._listeners.discard(listener)

    def _emit(
        self,
        event_type: TtlCacheEventType,
        key: Optional[str],
        timestamp: float,
        metadata: Optional[dict] = None,
    ) -> None:
        """Emit an event to all listeners."""
        if not self._listeners:
            return
        event = TtlCacheEvent(type=event_type, key=key, timestamp=timestamp, metadata=metadata)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"TtlCache listener failed for {event_type.value}")


def create_ttl_cache(config: Optional[TtlCacheConfig] = None) -> TtlCache:
    """Create a TTL cache."""
    return TtlCache(config)
