"""
Exceptions raised by store_bootstrap.
"""
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from .types import BackendKind

if TYPE_CHECKING:
    from .types import BootstrapAttempt


class StoreBootstrapError(Exception):
    """Base class for store bootstrap errors."""


class StoreLoadError(StoreBootstrapError):
    """
    A tier could not be loaded.

    `details` holds the underlying errors when the load failed for more than
    one reason.
    """

    def __init__(
        self,
        kind: BackendKind,
        message: str,
        details: Optional[Sequence[BaseException]] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details: List[BaseException] = list(details or [])


class StoreLoadTimeoutError(StoreLoadError):
    """A tier did not finish loading within the load timeout."""


class FatalBootstrapError(StoreBootstrapError):
    """No tier could be loaded, not even the in-memory one."""

    def __init__(self, attempts: Sequence["BootstrapAttempt"]) -> None:
        self.attempts = list(attempts)
        diagnostics = "; ".join(
            f"{attempt.backend_kind.value}: {attempt.diagnostic}" for attempt in self.attempts
        )
        super().__init__(f"No storage backend could be loaded ({diagnostics})")


def _flatten(errors: Iterable[BaseException]) -> List[BaseException]:
    flat: List[BaseException] = []
    for error in errors:
        nested = getattr(error, "details", None)
        if nested:
            flat.extend(_flatten(nested))
        else:
            flat.append(error)
    return flat


def _describe(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"


def format_store_error(error: BaseException) -> str:
    """
    Render a load failure as one diagnostic line.

    Errors carrying `details` are flattened and each underlying error is
    described, joined with " | ".
    """
    details = getattr(error, "details", None)
    if details:
        return " | ".join(_describe(detail) for detail in _flatten(details))
    return _describe(error)
