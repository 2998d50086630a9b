"""
Dictionary lookup cascade with translation enrichment, offline fallback and
a time-bounded cache.
"""
from .types import (
    ExamplePair,
    LookupResult,
    CanonicalEntry,
    Resolution,
    ResolutionSource,
    TransportRequest,
    TransportResponse,
    Transport,
    NetworkDictionaryProvider,
    OfflineFallbackProvider,
    TranslationService,
    CascadeConfig,
    SingleflightResult,
    SingleflightEvent,
    SingleflightEventType,
    SingleflightEventListener,
)
from .errors import (
    CascadeError,
    TransportError,
    DecodeError,
    TranslationError,
)
from .transport import HttpxTransport, TimeoutConfig
from .translation import GoogleTranslateService, GOOGLE_TRANSLATE_URL
from .providers import (
    JishoDictionaryProvider,
    JISHO_SEARCH_URL,
    MockOfflineProvider,
    OFFLINE_CONFIDENCE,
    build_placeholder,
    estimate_reading,
)
from .singleflight import Singleflight, create_singleflight
from .cascade import (
    LookupCascade,
    DEFAULT_CASCADE_CONFIG,
    merge_cascade_config,
    normalize_term,
    extract_meanings,
)
from .autofill import (
    AutofillSession,
    AutofillConfig,
    AutofillStatus,
    DEFAULT_AUTOFILL_CONFIG,
    merge_autofill_config,
)


__all__ = [
    # Types
    "ExamplePair",
    "LookupResult",
    "CanonicalEntry",
    "Resolution",
    "ResolutionSource",
    "TransportRequest",
    "TransportResponse",
    "Transport",
    "NetworkDictionaryProvider",
    "OfflineFallbackProvider",
    "TranslationService",
    "CascadeConfig",
    "SingleflightResult",
    "SingleflightEvent",
    "SingleflightEventType",
    "SingleflightEventListener",
    # Errors
    "CascadeError",
    "TransportError",
    "DecodeError",
    "TranslationError",
    # Transport / collaborators
    "HttpxTransport",
    "TimeoutConfig",
    "GoogleTranslateService",
    "GOOGLE_TRANSLATE_URL",
    "JishoDictionaryProvider",
    "JISHO_SEARCH_URL",
    "MockOfflineProvider",
    "OFFLINE_CONFIDENCE",
    "build_placeholder",
    "estimate_reading",
    # Singleflight
    "Singleflight",
    "create_singleflight",
    # Cascade
    "LookupCascade",
    "DEFAULT_CASCADE_CONFIG",
    "merge_cascade_config",
    "normalize_term",
    "extract_meanings",
    # Autofill
    "AutofillSession",
    "AutofillConfig",
    "AutofillStatus",
    "DEFAULT_AUTOFILL_CONFIG",
    "merge_autofill_config",
]

__version__ = "1.0.0"
