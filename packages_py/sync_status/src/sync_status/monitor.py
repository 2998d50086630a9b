"""
Synchronization status monitor.

Holds the current SyncStatus and updates it from remote change
notifications and account probes. Every write bumps a generation counter so
a delayed settle write can tell it has been superseded.
"""
import asyncio
import logging
from typing import Callable, Optional, Set

from .types import (
    AccountStatus,
    RemoteAccountProbe,
    SyncMonitorConfig,
    SyncStatus,
    SyncStatusListener,
)

logger = logging.getLogger("sync_status.monitor")


DEFAULT_SYNC_MONITOR_CONFIG = SyncMonitorConfig()


def merge_sync_monitor_config(config: Optional[SyncMonitorConfig] = None) -> SyncMonitorConfig:
    """Merge configuration with defaults."""
    if config is None:
        return SyncMonitorConfig()
    if config.settle_delay_seconds < 0:
        raise ValueError(
            f"settle_delay_seconds must be >= 0, got {config.settle_delay_seconds}"
        )
    return config


def map_account_status(status: AccountStatus) -> SyncStatus:
    """Translate a probe answer into a sync status."""
    if status == AccountStatus.AVAILABLE:
        return SyncStatus.synced()
    if status == AccountStatus.NO_ACCOUNT:
        return SyncStatus.need_sign_in()
    return SyncStatus.offline()


class SyncStatusMonitor:
    """
    Tracks the synchronization state shown to the user.

    Example:
        monitor = SyncStatusMonitor(probe, SyncMonitorConfig(remote_identity="vocab"))
        await monitor.start()
        monitor.on(lambda status: print(status.label))
        monitor.notify_remote_change()
    """

    def __init__(
        self,
        probe: Optional[RemoteAccountProbe] = None,
        config: Optional[SyncMonitorConfig] = None,
        initial: Optional[SyncStatus] = None,
    ) -> None:
        self._probe = probe
        self._config = merge_sync_monitor_config(config)
        self._status = initial or SyncStatus.synced()
        self._generation = 0
        self._settle_task: Optional[asyncio.Task] = None
        self._listeners: Set[SyncStatusListener] = set()

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def config(self) -> SyncMonitorConfig:
        return self._config

    def set_status(self, status: SyncStatus) -> None:
        """Replace the current status (last write wins)."""
        self._generation += 1
        previous = self._status
        self._status = status
        if status != previous:
            logger.debug(f"SyncStatusMonitor: {previous.state.value} -> {status.state.value}")
        self._emit(status)

    def notify_remote_change(self) -> None:
        """
        Report that the remote store delivered changes.

        Shows SYNCING immediately and settles to SYNCED after the settle delay,
        unless another status write happens first.
        """
        self.set_status(SyncStatus.syncing())
        generation = self._generation
        if self._settle_task is not None and not self._settle_task.done():
            self._settle_task.cancel()
        self._settle_task = asyncio.get_running_loop().create_task(self._settle(generation))

    async def _settle(self, generation: int) -> None:
        await asyncio.sleep(self._config.settle_delay_seconds)
        if generation != self._generation:
            logger.debug("SyncStatusMonitor: settle superseded by a newer status")
            return
        self.set_status(SyncStatus.synced())

    async def retry_sync(self) -> SyncStatus:
        """Re-check the remote account and update the status."""
        if not self._config.remote_identity or self._probe is None:
            self.set_status(SyncStatus.offline())
            return self._status

        try:
            account = await self._probe.check_status()
        except Exception as error:
            logger.warning(f"SyncStatusMonitor: account probe failed: {error}")
            self.set_status(SyncStatus.error(str(error)))
            return self._status

        self.set_status(map_account_status(account))
        return self._status

    async def start(self) -> None:
        """
        Run the startup account check.

        Callers decide whether startup probing applies: the app only starts the
        monitor when the remote synced tier was adopted, so a local or in-memory
        store keeps its OFFLINE status until an explicit retry_sync().
        """
        await self.retry_sync()

    async def wait_settled(self) -> None:
        """Wait for a pending settle write, if any."""
        if self._settle_task is not None:
            await asyncio.wait({self._settle_task})

    async def close(self) -> None:
        """Cancel the pending settle and release listeners."""
        if self._settle_task is not None and not self._settle_task.done():
            self._settle_task.cancel()
            await asyncio.wait({self._settle_task})
        self._settle_task = None
        self._listeners.clear()

    def on(self, listener: SyncStatusListener) -> Callable[[], None]:
        """Add status listener."""
        self._listeners.add(listener)
        return lambda: self._listeners.discard(listener)

    def off(self, listener: SyncStatusListener) -> None:
        """Remove status listener."""
        self._listeners.discard(listener)

    def _emit(self, status: SyncStatus) -> None:
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("SyncStatusMonitor listener failed")


def create_sync_monitor(
    probe: Optional[RemoteAccountProbe] = None,
    config: Optional[SyncMonitorConfig] = None,
    initial: Optional[SyncStatus] = None,
) -> SyncStatusMonitor:
    """Create a sync status monitor."""
    return SyncStatusMonitor(probe=probe, config=config, initial=initial)
