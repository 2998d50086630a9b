"""
Error types raised by lookup collaborators.

The cascade absorbs all of them behind the offline fallback; they exist so
providers can report what went wrong and logs can say so.
"""
from typing import Optional


class CascadeError(Exception):
    """Base class for lookup and enrichment failures."""

    pass


class TransportError(CascadeError):
    """Network failure, timeout, or a non-success HTTP status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(CascadeError):
    """Response body could not be decoded into the expected schema."""

    pass


class TranslationError(CascadeError):
    """Translation of a meaning failed."""

    pass
