"""
Types for the time-bounded key/value cache.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, TypeVar


V = TypeVar("V")

THIRTY_DAYS_SECONDS = 30 * 24 * 60 * 60


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A cached value and the moment it was stored."""

    value: V
    """Stored value."""

    stored_at: float
    """When the value was stored (clock seconds)."""

    def age(self, now: float) -> float:
        """Seconds elapsed since the entry was stored."""
        return now - self.stored_at


@dataclass
class TtlCacheConfig:
    """Configuration for TtlCache."""

    ttl_seconds: float = THIRTY_DAYS_SECONDS
    """Maximum age of an entry before it is treated as absent. Default: 30 days."""

    clock: Optional[Callable[[], float]] = None
    """Time source. Default: time.time."""


@dataclass
class TtlCacheStats:
    """Counters collected by a TtlCache."""

    entries: int
    hits: int
    misses: int
    expired: int


class TtlCacheEventType(str, Enum):
    """Event types for cache operations."""

    CACHE_HIT = "cache:hit"
    CACHE_MISS = "cache:miss"
    CACHE_STORE = "cache:store"
    CACHE_EXPIRE = "cache:expire"
    CACHE_REMOVE = "cache:remove"
    CACHE_CLEAR = "cache:clear"


@dataclass
class TtlCacheEvent:
    """Cache event."""

    type: TtlCacheEventType
    key: Optional[str]
    timestamp: float
    metadata: Optional[Dict[str, Any]] = None


TtlCacheEventListener = Callable[[TtlCacheEvent], None]
"""Event listener type."""
