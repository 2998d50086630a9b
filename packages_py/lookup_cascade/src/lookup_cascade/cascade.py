"""
Lookup cascade: cache -> network provider -> translation -> offline fallback.

Callers observe three outcomes only:
- None: empty input, or a reachable service found nothing
- a network result (confidence 0.9, or 0.6 without meanings)
- an offline placeholder (confidence 0.4) when any network stage failed

Raw transport, decode and translation errors never reach the caller.
"""
import asyncio
import logging
from typing import Awaitable, List, Optional, Sequence, TypeVar

from cache_ttl import TtlCache

from .singleflight import Singleflight
from .types import (
    CanonicalEntry,
    CascadeConfig,
    LookupResult,
    NetworkDictionaryProvider,
    OfflineFallbackProvider,
    Resolution,
    ResolutionSource,
    TranslationService,
)

logger = logging.getLogger("lookup_cascade.cascade")

T = TypeVar("T")


DEFAULT_CASCADE_CONFIG = CascadeConfig()


def merge_cascade_config(config: Optional[CascadeConfig] = None) -> CascadeConfig:
    """Merge configuration with defaults."""
    if config is None:
        return CascadeConfig()
    if config.max_meanings < 0:
        raise ValueError(f"max_meanings must be >= 0, got {config.max_meanings}")
    if config.lookup_timeout_seconds is not None and config.lookup_timeout_seconds <= 0:
        raise ValueError("lookup_timeout_seconds must be positive or None")
    return config


def normalize_term(term: str) -> str:
    """Trim surrounding whitespace."""
    return term.strip()


def extract_meanings(meaning_groups: Sequence[Sequence[str]], limit: int) -> List[str]:
    """
    Join each meaning group, trim it, and drop empties.

    Only the first `limit` groups are considered.
    """
    meanings = ["; ".join(group).strip() for group in list(meaning_groups)[:limit]]
    return [meaning for meaning in meanings if meaning]


class LookupCascade:
    """
    Resolves a term through an ordered chain of lookup tiers.

    Cache hits are returned unchanged and never refreshed, even when they
    came from the offline fallback.

    Example:
        cascade = LookupCascade(
            cache=cache,
            primary=JishoDictionaryProvider(transport),
            fallback=MockOfflineProvider(cache),
            translator=GoogleTranslateService(transport),
        )
        result = await cascade.resolve("猫")
    """

    def __init__(
        self,
        cache: TtlCache[LookupResult],
        primary: NetworkDictionaryProvider,
        fallback: OfflineFallbackProvider,
        translator: Optional[TranslationService] = None,
        config: Optional[CascadeConfig] = None,
        singleflight: Optional[Singleflight] = None,
    ) -> None:
        self._cache = cache
        self._primary = primary
        self._fallback = fallback
        self._translator = translator
        self._config = merge_cascade_config(config)
        self._singleflight = singleflight or Singleflight()

    @property
    def config(self) -> CascadeConfig:
        return self._config

    async def resolve(self, term: str) -> Optional[LookupResult]:
        """Resolve a term to a result, or None."""
        resolution = await self.resolve_detailed(term)
        return resolution.result

    async def resolve_detailed(self, term: str) -> Resolution:
        """Resolve a term and report which tier answered."""
        normalized = normalize_term(term)
        if not normalized:
            return Resolution(result=None, source=ResolutionSource.NONE)

        cached = await self._cache.get(normalized)
        if cached is not None:
            logger.debug(f"LookupCascade: cache hit for term={normalized!r}")
            return Resolution(result=cached, source=ResolutionSource.CACHE)

        if not self._config.coalesce:
            return await self._resolve_uncached(normalized)

        flight = await self._singleflight.do(
            normalized, lambda: self._resolve_uncached(normalized)
        )
        resolution = flight.value
        return Resolution(result=resolution.result, source=resolution.source, shared=flight.shared)

    async def _resolve_uncached(self, term: str) -> Resolution:
        # A flight that finished between our miss and joining may have filled the cache.
        cached = await self._cache.get(term)
        if cached is not None:
            return Resolution(result=cached, source=ResolutionSource.CACHE)

        try:
            result = await self._bounded(self._lookup_network(term))
        except Exception as error:
            logger.warning(
                f"LookupCascade: network tier failed for term={term!r} "
                f"({type(error).__name__}: {error}); using {self._fallback.name} fallback"
            )
            return await self._resolve_fallback(term)

        if result is None:
            logger.debug(f"LookupCascade: {self._primary.name} found nothing for term={term!r}")
            return Resolution(result=None, source=ResolutionSource.NONE)

        await self._cache.set(term, result)
        return Resolution(result=result, source=ResolutionSource.NETWORK)

    async def _resolve_fallback(self, term: str) -> Resolution:
        result = await self._fallback.search(term)
        if result is not None:
            await self._cache.set(term, result)
        return Resolution(result=result, source=ResolutionSource.FALLBACK)

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        timeout = self._config.lookup_timeout_seconds
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=timeout)

    async def _lookup_network(self, term: str) -> Optional[LookupResult]:
        entry = await self._primary.lookup(term)
        if entry is None:
            return None
        return await self._to_result(entry)

    async def _to_result(self, entry: CanonicalEntry) -> LookupResult:
        reading = entry.first_reading()
        meanings = extract_meanings(entry.meaning_groups, self._config.max_meanings)

        if self._translator is not None and meanings:
            # TranslationError propagates: no partially translated results.
            meanings = await self._translator.translate_many(
                meanings, self._config.source_lang, self._config.target_lang
            )

        confidence = (
            self._config.network_confidence
            if meanings
            else self._config.empty_network_confidence
        )
        return LookupResult(
            reading=reading,
            meanings=tuple(meanings),
            examples=(),
            confidence=confidence,
        )

    def close(self) -> None:
        """Cancel any in-flight shared lookups."""
        self._singleflight.close()
