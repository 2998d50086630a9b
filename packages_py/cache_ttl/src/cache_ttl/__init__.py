"""
In-memory key/value cache with lazy time-to-live expiry.
"""
from .types import (
    CacheEntry,
    TtlCacheConfig,
    TtlCacheStats,
    TtlCacheEvent,
    TtlCacheEventType,
    TtlCacheEventListener,
    THIRTY_DAYS_SECONDS,
)
from .cache import (
    TtlCache,
    create_ttl_cache,
    DEFAULT_TTL_CONFIG,
    merge_ttl_config,
)


__all__ = [
    # Types
    "CacheEntry",
    "TtlCacheConfig",
    "TtlCacheStats",
    "TtlCacheEvent",
    "TtlCacheEventType",
    "TtlCacheEventListener",
    "THIRTY_DAYS_SECONDS",
    # Cache
    "TtlCache",
    "create_ttl_cache",
    "DEFAULT_TTL_CONFIG",
    "merge_ttl_config",
]

__version__ = "1.0.0"
