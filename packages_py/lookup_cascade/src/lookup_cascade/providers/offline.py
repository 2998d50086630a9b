"""
Offline fallback provider.

Synthesizes a deterministic placeholder so a lookup always has an answer
when the network tier is unavailable.
"""
import logging
from typing import Optional

from cache_ttl import TtlCache

from ..types import ExamplePair, LookupResult, OfflineFallbackProvider

logger = logging.getLogger("lookup_cascade.providers.offline")

OFFLINE_CONFIDENCE = 0.4

_HIRAGANA = ("\u3040", "\u309f")
_KATAKANA = ("\u30a0", "\u30ff")


def is_kana(char: str) -> bool:
    """Whether a character is hiragana or katakana."""
    return _HIRAGANA[0] <= char <= _HIRAGANA[1] or _KATAKANA[0] <= char <= _KATAKANA[1]


def estimate_reading(term: str) -> Optional[str]:
    """A term written entirely in kana is its own reading."""
    if term and all(is_kana(char) for char in term):
        return term
    return None


def build_placeholder(term: str) -> LookupResult:
    """Deterministic offline result for a term."""
    return LookupResult(
        reading=estimate_reading(term),
        meanings=(
            f"(offline) {term} - meaning 1",
            f"(offline) {term} - meaning 2",
        ),
        examples=(
            ExamplePair(source=f"{term}の例文です。", target=f"{term}의 예문입니다."),
            ExamplePair(source=f"これは{term}です。", target=f"이것은 {term}입니다."),
        ),
        confidence=OFFLINE_CONFIDENCE,
    )


class MockOfflineProvider(OfflineFallbackProvider):
    """
    Cache-aware placeholder provider.

    Checks the shared cache first in case a concurrent lookup already filled
    it, otherwise builds and caches a placeholder.
    """

    name = "offline"

    def __init__(self, cache: TtlCache[LookupResult]) -> None:
        self._cache = cache

    async def search(self, term: str) -> LookupResult:
        cached = await self._cache.get(term)
        if cached is not None:
            return cached

        result = build_placeholder(term)
        await self._cache.set(term, result)
        logger.debug(f"MockOfflineProvider.search: synthesized placeholder for term={term!r}")
        return result
