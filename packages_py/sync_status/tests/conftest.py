"""Pytest configuration and fixtures for sync_status tests."""
import pytest
from unittest.mock import AsyncMock

from sync_status import (
    AccountStatus,
    RemoteAccountProbe,
    SyncMonitorConfig,
    SyncStatusMonitor,
)


@pytest.fixture
def probe() -> AsyncMock:
    """Probe mock answering AVAILABLE by default."""
    mock = AsyncMock(spec=RemoteAccountProbe)
    mock.check_status.return_value = AccountStatus.AVAILABLE
    return mock


@pytest.fixture
async def monitor(probe: AsyncMock) -> SyncStatusMonitor:
    """Monitor with a remote identity and a short settle delay."""
    instance = SyncStatusMonitor(
        probe=probe,
        config=SyncMonitorConfig(remote_identity="vocab", settle_delay_seconds=0.02),
    )
    yield instance
    await instance.close()
