"""Pytest configuration and fixtures for cache_ttl tests."""
import pytest
from typing import Generator

from cache_ttl import TtlCache, TtlCacheConfig


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock for deterministic expiry."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> Generator[TtlCache, None, None]:
    """Create a cache with a 60 second TTL driven by the fake clock."""
    yield TtlCache(TtlCacheConfig(ttl_seconds=60, clock=clock))
