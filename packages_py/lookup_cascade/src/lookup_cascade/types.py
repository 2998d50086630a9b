"""
Type definitions for lookup_cascade.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar


T = TypeVar("T")


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class ExamplePair:
    """An example sentence and its translation."""

    source: str
    target: str


@dataclass(frozen=True)
class LookupResult:
    """
    Outcome of resolving one term.

    Confidence encodes provenance: network results score 0.9 (0.6 when no
    meaning survived extraction), offline placeholders 0.4.
    """

    reading: Optional[str] = None
    """Reading or romanization (first available)."""

    meanings: Tuple[str, ...] = ()
    """Ordered meanings, translated when enrichment is configured."""

    examples: Tuple[ExamplePair, ...] = ()
    """Example sentence pairs."""

    confidence: float = 0.0
    """Provenance score in [0, 1]."""

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")
        # Accept lists from callers but store tuples so the value stays hashable.
        object.__setattr__(self, "meanings", tuple(self.meanings))
        object.__setattr__(self, "examples", tuple(self.examples))

    @property
    def has_reading(self) -> bool:
        return bool(self.reading)

    @property
    def has_meanings(self) -> bool:
        return bool(self.meanings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reading": self.reading,
            "meanings": list(self.meanings),
            "examples": [{"source": e.source, "target": e.target} for e in self.examples],
            "confidence": self.confidence,
        }


@dataclass
class CanonicalEntry:
    """Provider-neutral dictionary entry."""

    readings: List[str] = field(default_factory=list)
    meaning_groups: List[List[str]] = field(default_factory=list)

    def first_reading(self) -> Optional[str]:
        for reading in self.readings:
            if reading and reading.strip():
                return reading.strip()
        return None


class ResolutionSource(str, Enum):
    """Where a resolution came from."""

    NONE = "none"
    CACHE = "cache"
    NETWORK = "network"
    FALLBACK = "fallback"


@dataclass
class Resolution:
    """A resolved result with the tier that produced it."""

    result: Optional[LookupResult]
    source: ResolutionSource
    shared: bool = False
    """True when the result was produced by another caller's in-flight lookup."""


# =============================================================================
# Transport
# =============================================================================


@dataclass
class TransportRequest:
    """HTTP request description handed to a Transport."""

    url: str
    method: str = "GET"
    params: Optional[Dict[str, str]] = None
    headers: Optional[Dict[str, str]] = None


@dataclass
class TransportResponse:
    """Raw response returned by a Transport."""

    body: bytes
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(ABC):
    """Sends requests. Raises TransportError on transport failure."""

    @abstractmethod
    async def send(self, request: TransportRequest) -> TransportResponse:
        """Send a request and return body and status."""
        pass

    async def close(self) -> None:
        """Release resources."""
        pass


# =============================================================================
# Providers
# =============================================================================


class NetworkDictionaryProvider(ABC):
    """Primary tier: a reachable dictionary service."""

    name: str = "network"

    @abstractmethod
    async def lookup(self, term: str) -> Optional[CanonicalEntry]:
        """
        Look up a term.

        Returns None when the service answered with no entries. Raises
        TransportError or DecodeError when it could not be asked or understood.
        """
        pass


class OfflineFallbackProvider(ABC):
    """Last tier: never fails and never touches the network."""

    name: str = "offline"

    @abstractmethod
    async def search(self, term: str) -> LookupResult:
        """Produce a best-effort result for a term."""
        pass


class TranslationService(ABC):
    """Translates meaning strings between languages."""

    @abstractmethod
    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Translate one text. Raises TranslationError on failure."""
        pass

    async def translate_many(
        self, texts: Sequence[str], source_lang: str, target_lang: str
    ) -> List[str]:
        """Translate texts one at a time, in order."""
        results: List[str] = []
        for text in texts:
            # Sequential to stay under the upstream's informal rate limit.
            results.append(await self.translate(text, source_lang, target_lang))
        return results


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class CascadeConfig:
    """Configuration for LookupCascade."""

    max_meanings: int = 8
    """Maximum meaning groups taken from a canonical entry."""

    source_lang: str = "en"
    """Language of the provider's meanings."""

    target_lang: str = "ko"
    """Language meanings are translated into."""

    lookup_timeout_seconds: Optional[float] = 15.0
    """Bound on network lookup plus enrichment. None disables it."""

    coalesce: bool = True
    """Share one in-flight network lookup among concurrent callers for a term."""

    network_confidence: float = 0.9
    empty_network_confidence: float = 0.6


# =============================================================================
# Singleflight
# =============================================================================


@dataclass
class SingleflightResult(Generic[T]):
    """Result of a coalesced execution."""

    value: T
    shared: bool
    subscribers: int


class SingleflightEventType(str, Enum):
    """Event types for singleflight operations."""

    SINGLEFLIGHT_LEAD = "singleflight:lead"
    SINGLEFLIGHT_JOIN = "singleflight:join"
    SINGLEFLIGHT_COMPLETE = "singleflight:complete"
    SINGLEFLIGHT_ERROR = "singleflight:error"


@dataclass
class SingleflightEvent:
    """Singleflight event."""

    type: SingleflightEventType
    key: str
    timestamp: float
    metadata: Optional[Dict[str, Any]] = None


SingleflightEventListener = Callable[[SingleflightEvent], None]
"""Event listener type."""
