"""
Observable synchronization status with remote-change settling and
account probing.
"""
from .types import (
    SyncState,
    SyncStatus,
    SyncStatusListener,
    AccountStatus,
    RemoteAccountProbe,
    SyncMonitorConfig,
)
from .monitor import (
    SyncStatusMonitor,
    create_sync_monitor,
    DEFAULT_SYNC_MONITOR_CONFIG,
    merge_sync_monitor_config,
    map_account_status,
)
from .probe import HttpAccountProbe, ACCOUNT_STATUS_PATH


__all__ = [
    # Types
    "SyncState",
    "SyncStatus",
    "SyncStatusListener",
    "AccountStatus",
    "RemoteAccountProbe",
    "SyncMonitorConfig",
    # Monitor
    "SyncStatusMonitor",
    "create_sync_monitor",
    "DEFAULT_SYNC_MONITOR_CONFIG",
    "merge_sync_monitor_config",
    "map_account_status",
    # Probe
    "HttpAccountProbe",
    "ACCOUNT_STATUS_PATH",
]

__version__ = "1.0.0"
