"""
Dictionary providers for the lookup cascade.
"""
from .jisho import JishoDictionaryProvider, JishoResponse, JISHO_SEARCH_URL
from .offline import (
    MockOfflineProvider,
    OFFLINE_CONFIDENCE,
    build_placeholder,
    estimate_reading,
    is_kana,
)

__all__ = [
    "JishoDictionaryProvider",
    "JishoResponse",
    "JISHO_SEARCH_URL",
    "MockOfflineProvider",
    "OFFLINE_CONFIDENCE",
    "build_placeholder",
    "estimate_reading",
    "is_kana",
]
