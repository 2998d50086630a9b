"""
Tiered store bootstrap: REMOTE_SYNC -> LOCAL_ONLY -> IN_MEMORY.

Loading is the one blocking step of the application. Each tier gets a
bounded load; the first tier that loads is adopted for the rest of the
process and is never swapped.
"""
import logging
from typing import List, Optional

from sync_status import SyncStatus

from .errors import FatalBootstrapError, format_store_error
from .handle import StorageBackendHandle
from .types import (
    BackendKind,
    BootstrapAttempt,
    BootstrapConfig,
    BootstrapResult,
    HandleFactory,
    MergePolicy,
    StatusListener,
)

logger = logging.getLogger("store_bootstrap.bootstrapper")


DEFAULT_BOOTSTRAP_CONFIG = BootstrapConfig()


def merge_bootstrap_config(config: Optional[BootstrapConfig] = None) -> BootstrapConfig:
    """Merge configuration with defaults."""
    if config is None:
        return BootstrapConfig()
    if config.load_timeout_seconds <= 0:
        raise ValueError(
            f"load_timeout_seconds must be positive, got {config.load_timeout_seconds}"
        )
    return config


class StoreBootstrapper:
    """
    Picks the storage tier the application runs on.

    Example:
        bootstrapper = StoreBootstrapper(
            SqlAlchemyHandleFactory(SqlAlchemyStoreConfig(remote_url=url)),
            BootstrapConfig(remote_identity="vocab"),
        )
        result = bootstrapper.bootstrap()
        with result.handle.context.session() as session:
            ...
    """

    def __init__(
        self,
        handle_factory: HandleFactory,
        config: Optional[BootstrapConfig] = None,
        on_status: Optional[StatusListener] = None,
    ) -> None:
        self._factory = handle_factory
        self._config = merge_bootstrap_config(config)
        self._on_status = on_status

    @property
    def config(self) -> BootstrapConfig:
        return self._config

    def bootstrap(self, in_memory: bool = False) -> BootstrapResult:
        """
        Load the first healthy tier.

        Raises:
            FatalBootstrapError: if even the in-memory tier fails to load.
        """
        attempts: List[BootstrapAttempt] = []

        for kind in (BackendKind.REMOTE_SYNC, BackendKind.LOCAL_ONLY):
            handle, attempt = self._try_load(kind, in_memory)
            attempts.append(attempt)
            if attempt.succeeded:
                if kind == BackendKind.REMOTE_SYNC and self._config.remote_identity:
                    status = SyncStatus.synced()
                else:
                    status = SyncStatus.offline()
                return self._adopt(handle, kind, status, attempts)
            self._publish(SyncStatus.error(attempt.diagnostic))

        handle, attempt = self._try_load(BackendKind.IN_MEMORY, True)
        attempts.append(attempt)
        if not attempt.succeeded:
            logger.error(f"StoreBootstrapper: in-memory store failed: {attempt.diagnostic}")
            raise FatalBootstrapError(attempts)
        return self._adopt(handle, BackendKind.IN_MEMORY, SyncStatus.offline(), attempts)

    def _try_load(self, kind: BackendKind, in_memory: bool):
        handle: Optional[StorageBackendHandle] = None
        try:
            handle = self._factory(kind, in_memory)
            logger.debug(f"StoreBootstrapper: loading {handle.describe()}")
            error = handle.load_synchronously(self._config.load_timeout_seconds)
        except Exception as exc:
            error = exc

        if error is None:
            return handle, BootstrapAttempt(backend_kind=kind)

        diagnostic = format_store_error(error)
        logger.warning(f"StoreBootstrapper: {kind.value} tier failed: {diagnostic}")
        if handle is not None:
            handle.close()
        return None, BootstrapAttempt(backend_kind=kind, error=error, diagnostic=diagnostic)

    def _adopt(
        self,
        handle: StorageBackendHandle,
        kind: BackendKind,
        status: SyncStatus,
        attempts: List[BootstrapAttempt],
    ) -> BootstrapResult:
        handle.configure_context(
            auto_merge_changes=True,
            merge_policy=MergePolicy.LATEST_WINS,
        )
        logger.info(f"StoreBootstrapper: adopted {handle.describe()} (status={status.state.value})")
        self._publish(status)
        return BootstrapResult(
            active_kind=kind,
            status=status,
            handle=handle,
            attempts=attempts,
        )

    def _publish(self, status: SyncStatus) -> None:
        if self._on_status is None:
            return
        try:
            self._on_status(status)
        except Exception:
            logger.exception("StoreBootstrapper status listener failed")


def create_store_bootstrapper(
    handle_factory: HandleFactory,
    config: Optional[BootstrapConfig] = None,
    on_status: Optional[StatusListener] = None,
) -> StoreBootstrapper:
    """Create a store bootstrapper."""
    return StoreBootstrapper(handle_factory, config=config, on_status=on_status)
