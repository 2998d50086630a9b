"""Sync status routes."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sync_status import SyncStatus

from app.container import AppContainer, get_container


class SyncStatusResponse(BaseModel):
    """Current sync status."""
    state: str
    message: Optional[str]
    label: str
    healthy: bool
    timestamp: str

    @classmethod
    def from_status(cls, status: SyncStatus) -> "SyncStatusResponse":
        return cls(**status.to_dict(), timestamp=datetime.now().isoformat())


router = APIRouter()


@router.get("/status", response_model=SyncStatusResponse)
async def get_sync_status(container: AppContainer = Depends(get_container)):
    """Current sync status (last write wins)."""
    return SyncStatusResponse.from_status(container.monitor.status)


@router.post("/retry", response_model=SyncStatusResponse)
async def retry_sync(container: AppContainer = Depends(get_container)):
    """Re-check the remote account and return the resulting status."""
    status = await container.monitor.retry_sync()
    return SyncStatusResponse.from_status(status)


@router.post("/remote-change", response_model=SyncStatusResponse, status_code=202)
async def notify_remote_change(container: AppContainer = Depends(get_container)):
    """Report a change delivered by the remote store; settles to synced after a delay."""
    container.monitor.notify_remote_change()
    return SyncStatusResponse.from_status(container.monitor.status)
