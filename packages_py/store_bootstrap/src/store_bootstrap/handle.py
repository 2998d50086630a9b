"""
Storage backend handle contract and the bounded blocking load.
"""
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional

from .errors import StoreLoadError, StoreLoadTimeoutError
from .types import BackendKind, MergePolicy, StoreContext

logger = logging.getLogger("store_bootstrap.handle")


class StorageBackendHandle(ABC):
    """Opaque handle to one storage tier."""

    kind: BackendKind

    @abstractmethod
    def load_synchronously(self, timeout: float) -> Optional[Exception]:
        """
        Open the store, blocking the caller for at most `timeout` seconds.

        Returns:
            None on success, otherwise the load error. Never raises for an
            ordinary load failure.
        """
        pass

    @abstractmethod
    def configure_context(
        self,
        auto_merge_changes: bool = True,
        merge_policy: MergePolicy = MergePolicy.LATEST_WINS,
    ) -> StoreContext:
        """Build the post-load context with the given merge settings."""
        pass

    @property
    @abstractmethod
    def context(self) -> StoreContext:
        """The configured context; raises RuntimeError before configure_context()."""
        pass

    def describe(self) -> str:
        """Human-readable location of the store."""
        return self.kind.value

    def close(self) -> None:
        """Release resources held by the handle."""
        pass


class ThreadedBackendHandle(StorageBackendHandle):
    """
    Runs the blocking `_open()` on a worker thread and waits on its future.

    A load that overruns the timeout is abandoned: the caller gets a
    StoreLoadTimeoutError and whatever the worker opens afterwards is
    released through `_discard()`.
    """

    def __init__(self, kind: BackendKind) -> None:
        self.kind = kind
        self._lock = threading.Lock()
        self._abandoned = False
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @abstractmethod
    def _open(self) -> None:
        """Open the store; raise on failure."""
        pass

    def _discard(self) -> None:
        """Release what a successful `_open()` acquired."""
        pass

    def _wrap_error(self, error: Exception) -> StoreLoadError:
        return StoreLoadError(self.kind, f"Failed to load {self.describe()}", details=[error])

    def load_synchronously(self, timeout: float) -> Optional[Exception]:
        executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"store-load-{self.kind.value}"
        )
        try:
            future = executor.submit(self._open_guarded)
            try:
                future.result(timeout=timeout)
            except FutureTimeoutError:
                with self._lock:
                    self._abandoned = True
                logger.warning(
                    f"{type(self).__name__}: load of {self.describe()} exceeded {timeout}s"
                )
                return StoreLoadTimeoutError(
                    self.kind, f"Timed out after {timeout}s loading {self.describe()}"
                )
            except StoreLoadError as error:
                return error
            except Exception as error:
                return self._wrap_error(error)
        finally:
            executor.shutdown(wait=False)

        self._loaded = True
        logger.debug(f"{type(self).__name__}: loaded {self.describe()}")
        return None

    def _open_guarded(self) -> None:
        self._open()
        with self._lock:
            abandoned = self._abandoned
        if abandoned:
            logger.debug(f"{type(self).__name__}: discarding late load of {self.describe()}")
            self._discard()

    def close(self) -> None:
        with self._lock:
            self._abandoned = True
        self._discard()
        self._loaded = False
