"""Pytest configuration and fixtures for lookup_cascade tests."""
import asyncio
import pytest
from typing import Callable, Dict, List, Optional

import httpx

from cache_ttl import TtlCache, TtlCacheConfig
from lookup_cascade import (
    CanonicalEntry,
    CascadeConfig,
    HttpxTransport,
    LookupCascade,
    LookupResult,
    MockOfflineProvider,
    NetworkDictionaryProvider,
    TranslationService,
)


class FakeNetworkProvider(NetworkDictionaryProvider):
    """Scripted primary provider that records calls."""

    name = "fake-network"

    def __init__(self) -> None:
        self.entries: Dict[str, CanonicalEntry] = {}
        self.error: Optional[Exception] = None
        self.delay: float = 0
        self.calls: List[str] = []

    async def lookup(self, term: str) -> Optional[CanonicalEntry]:
        self.calls.append(term)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.entries.get(term)


class FakeTranslator(TranslationService):
    """Dictionary-backed translator that records calls."""

    def __init__(self, mapping: Optional[Dict[str, str]] = None) -> None:
        self.mapping = mapping or {}
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.mapping.get(text, text)


class SpyOfflineProvider(MockOfflineProvider):
    """Offline provider that counts searches."""

    def __init__(self, cache: TtlCache[LookupResult]) -> None:
        super().__init__(cache)
        self.calls: List[str] = []

    async def search(self, term: str) -> LookupResult:
        self.calls.append(term)
        return await super().search(term)


class FakeClock:
    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TtlCache[LookupResult]:
    """Cache with a one hour TTL driven by the fake clock."""
    return TtlCache(TtlCacheConfig(ttl_seconds=3600, clock=clock))


@pytest.fixture
def network() -> FakeNetworkProvider:
    return FakeNetworkProvider()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def offline(cache: TtlCache[LookupResult]) -> SpyOfflineProvider:
    return SpyOfflineProvider(cache)


@pytest.fixture
def make_cascade(
    cache: TtlCache[LookupResult],
    network: FakeNetworkProvider,
    offline: SpyOfflineProvider,
) -> Callable[..., LookupCascade]:
    """Factory for cascades sharing the fixtures above."""
    created: List[LookupCascade] = []

    def factory(
        translator: Optional[TranslationService] = None,
        config: Optional[CascadeConfig] = None,
    ) -> LookupCascade:
        cascade = LookupCascade(
            cache=cache,
            primary=network,
            fallback=offline,
            translator=translator,
            config=config,
        )
        created.append(cascade)
        return cascade

    yield factory

    for cascade in created:
        cascade.close()


@pytest.fixture
async def mock_transport_factory():
    """Build an HttpxTransport whose requests are answered by a handler."""
    transports: List[HttpxTransport] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> HttpxTransport:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = HttpxTransport(httpx_client=client)
        transports.append(transport)
        return transport

    yield factory

    for transport in transports:
        await transport.close()
