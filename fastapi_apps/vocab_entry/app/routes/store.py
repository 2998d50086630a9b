"""Store bootstrap summary route."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.container import AppContainer, get_container


class BootstrapAttemptModel(BaseModel):
    backendKind: str
    succeeded: bool
    diagnostic: Optional[str]


class StoreResponse(BaseModel):
    """Which storage tier is active and how it was chosen."""
    activeKind: str
    location: str
    syncState: str
    diagnostic: Optional[str]
    attempts: List[BootstrapAttemptModel]


router = APIRouter()


@router.get("", response_model=StoreResponse)
async def get_store(container: AppContainer = Depends(get_container)):
    result = container.bootstrap_result
    return StoreResponse(
        activeKind=result.active_kind.value,
        location=result.handle.describe(),
        syncState=result.status.state.value,
        diagnostic=result.diagnostic,
        attempts=[
            BootstrapAttemptModel(
                backendKind=attempt.backend_kind.value,
                succeeded=attempt.succeeded,
                diagnostic=attempt.diagnostic,
            )
            for attempt in result.attempts
        ],
    )
