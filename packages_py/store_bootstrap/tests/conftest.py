"""Pytest configuration and fixtures for store_bootstrap tests."""
import pytest
from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock

from store_bootstrap import (
    BackendKind,
    MergePolicy,
    StorageBackendHandle,
    StoreContext,
)


class FakeHandle(StorageBackendHandle):
    """Handle whose load outcome is scripted."""

    def __init__(self, kind: BackendKind, in_memory: bool, error: Optional[Exception] = None) -> None:
        self.kind = kind
        self.in_memory = in_memory
        self.error = error
        self.load_timeouts: List[float] = []
        self.configured: List[Tuple[bool, MergePolicy]] = []
        self.closed = False
        self._context: Optional[StoreContext] = None

    def load_synchronously(self, timeout: float) -> Optional[Exception]:
        self.load_timeouts.append(timeout)
        return self.error

    def configure_context(
        self,
        auto_merge_changes: bool = True,
        merge_policy: MergePolicy = MergePolicy.LATEST_WINS,
    ) -> StoreContext:
        self.configured.append((auto_merge_changes, merge_policy))
        self._context = StoreContext(
            session_factory=MagicMock(),
            auto_merge_changes=auto_merge_changes,
            merge_policy=merge_policy,
        )
        return self._context

    @property
    def context(self) -> StoreContext:
        if self._context is None:
            raise RuntimeError("not configured")
        return self._context

    def close(self) -> None:
        self.closed = True


class FakeHandleFactory:
    """Handle factory with per-tier scripted failures."""

    def __init__(self) -> None:
        self.failures: Dict[BackendKind, Exception] = {}
        self.created: List[FakeHandle] = []

    def __call__(self, kind: BackendKind, in_memory: bool = False) -> FakeHandle:
        handle = FakeHandle(kind, in_memory, self.failures.get(kind))
        self.created.append(handle)
        return handle

    def kinds(self) -> List[BackendKind]:
        return [handle.kind for handle in self.created]


@pytest.fixture
def factory() -> FakeHandleFactory:
    return FakeHandleFactory()
