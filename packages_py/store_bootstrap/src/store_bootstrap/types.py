"""
Type definitions for store_bootstrap.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generator, List, Optional

from sqlalchemy.orm import Session, sessionmaker

from sync_status import SyncStatus

if TYPE_CHECKING:
    from .handle import StorageBackendHandle


class BackendKind(str, Enum):
    """Storage tiers, most preferred first."""

    REMOTE_SYNC = "remote_sync"
    LOCAL_ONLY = "local_only"
    IN_MEMORY = "in_memory"


TIER_ORDER = (BackendKind.REMOTE_SYNC, BackendKind.LOCAL_ONLY, BackendKind.IN_MEMORY)


class MergePolicy(str, Enum):
    """How a write resolves against an already persisted row."""

    LATEST_WINS = "latest_wins"
    """Incoming property values overwrite the stored ones."""

    STORE_WINS = "store_wins"
    """The stored row is kept and the incoming values are dropped."""


@dataclass
class StoreContext:
    """
    Post-load context of an adopted backend.

    Hands out sessions bound to the adopted engine and applies the configured
    merge policy when writing.
    """

    session_factory: sessionmaker
    auto_merge_changes: bool = True
    merge_policy: MergePolicy = MergePolicy.LATEST_WINS

    def new_session(self) -> Session:
        """Create a new session; the caller owns and closes it."""
        return self.session_factory()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for store sessions.

        Usage:
            with context.session() as session:
                session.execute(select(WordRecord))
        """
        session = self.new_session()
        try:
            yield session
        finally:
            session.close()

    def merge(self, session: Session, record: Any) -> Any:
        """Write a record according to the merge policy and return the persistent instance."""
        if self.merge_policy == MergePolicy.LATEST_WINS:
            return session.merge(record)

        existing = session.get(type(record), record.id)
        if existing is not None:
            return existing
        session.add(record)
        return record


@dataclass(frozen=True)
class BootstrapAttempt:
    """Outcome of loading one tier."""

    backend_kind: BackendKind
    error: Optional[Exception] = None
    diagnostic: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class BootstrapResult:
    """The adopted tier and the initial sync status."""

    active_kind: BackendKind
    status: SyncStatus
    handle: "StorageBackendHandle"
    attempts: List[BootstrapAttempt] = field(default_factory=list)

    @property
    def diagnostic(self) -> Optional[str]:
        """Diagnostic of the last failed tier, if any tier failed."""
        failed = [attempt for attempt in self.attempts if not attempt.succeeded]
        return failed[-1].diagnostic if failed else None

    def to_dict(self) -> dict:
        return {
            "active_kind": self.active_kind.value,
            "status": self.status.to_dict(),
            "attempts": [
                {
                    "backend_kind": attempt.backend_kind.value,
                    "succeeded": attempt.succeeded,
                    "diagnostic": attempt.diagnostic,
                }
                for attempt in self.attempts
            ],
        }


@dataclass
class BootstrapConfig:
    """Configuration for StoreBootstrapper."""

    load_timeout_seconds: float = 10.0
    """Upper bound for each blocking tier load."""

    remote_identity: Optional[str] = None
    """Identifier of the remote sync container; None means a remote load reports OFFLINE."""


HandleFactory = Callable[[BackendKind, bool], "StorageBackendHandle"]
"""Builds the handle for a tier; the flag requests null-location storage."""

StatusListener = Callable[[SyncStatus], None]
