"""
Type definitions for sync_status.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


# =============================================================================
# Status value
# =============================================================================


class SyncState(str, Enum):
    SYNCED = "synced"
    SYNCING = "syncing"
    OFFLINE = "offline"
    NEED_SIGN_IN = "need_sign_in"
    ERROR = "error"


_LABELS = {
    SyncState.SYNCED: "Synced",
    SyncState.SYNCING: "Syncing...",
    SyncState.OFFLINE: "Offline",
    SyncState.NEED_SIGN_IN: "Sign-in required",
}


@dataclass(frozen=True)
class SyncStatus:
    """
    Observable synchronization state.

    Immutable: the monitor replaces the whole value on every change.
    `message` is only set for ERROR.
    """

    state: SyncState
    message: Optional[str] = None

    @classmethod
    def synced(cls) -> "SyncStatus":
        return cls(SyncState.SYNCED)

    @classmethod
    def syncing(cls) -> "SyncStatus":
        return cls(SyncState.SYNCING)

    @classmethod
    def offline(cls) -> "SyncStatus":
        return cls(SyncState.OFFLINE)

    @classmethod
    def need_sign_in(cls) -> "SyncStatus":
        return cls(SyncState.NEED_SIGN_IN)

    @classmethod
    def error(cls, message: str) -> "SyncStatus":
        return cls(SyncState.ERROR, message)

    @property
    def is_healthy(self) -> bool:
        """True for SYNCED and SYNCING."""
        return self.state in (SyncState.SYNCED, SyncState.SYNCING)

    @property
    def label(self) -> str:
        """Short display text."""
        if self.state == SyncState.ERROR:
            return f"Error: {self.message}"
        return _LABELS[self.state]

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "message": self.message,
            "label": self.label,
            "healthy": self.is_healthy,
        }


SyncStatusListener = Callable[[SyncStatus], None]


# =============================================================================
# Remote account probe
# =============================================================================


class AccountStatus(str, Enum):
    """Availability of the remote account, as reported by a probe."""

    AVAILABLE = "available"
    NO_ACCOUNT = "no_account"
    RESTRICTED = "restricted"
    COULD_NOT_DETERMINE = "could_not_determine"
    TEMPORARILY_UNAVAILABLE = "temporarily_unavailable"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "AccountStatus":
        """Parse a wire value; anything unrecognised is UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class RemoteAccountProbe(ABC):
    """Asks the remote sync service whether the account is usable."""

    @abstractmethod
    async def check_status(self) -> AccountStatus:
        """
        Query the account status.

        Raises:
            Exception: when the service could not be asked; the monitor
                reports the message as an ERROR status.
        """
        pass

    async def close(self) -> None:
        """Release resources held by the probe."""
        pass


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class SyncMonitorConfig:
    """Configuration for SyncStatusMonitor."""

    remote_identity: Optional[str] = None
    """Identifier of the remote sync container; None means local only."""

    settle_delay_seconds: float = 1.0
    """How long SYNCING is shown after a remote change notification."""
