"""Dictionary lookup routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from lookup_cascade import OFFLINE_CONFIDENCE, LookupResult

from app.container import AppContainer, get_container


class ExamplePairModel(BaseModel):
    source: str
    target: str


class LookupResultModel(BaseModel):
    """A resolved entry."""
    reading: Optional[str]
    meanings: List[str]
    examples: List[ExamplePairModel]
    confidence: float

    @classmethod
    def from_result(cls, result: LookupResult) -> "LookupResultModel":
        return cls(**result.to_dict())


class LookupResponse(BaseModel):
    """Lookup response; `result` is null when nothing was found."""
    term: str
    found: bool
    source: str
    shared: bool
    degraded: bool
    result: Optional[LookupResultModel]


router = APIRouter()


@router.get("/{term}", response_model=LookupResponse)
async def lookup_term(term: str, container: AppContainer = Depends(get_container)):
    """
    Resolve a term through cache, network dictionary, translation and
    offline fallback.

    Returns:
        LookupResponse: `degraded` is true for offline placeholders.
    """
    resolution = await container.cascade.resolve_detailed(term)
    result = resolution.result

    return LookupResponse(
        term=term.strip(),
        found=result is not None,
        source=resolution.source.value,
        shared=resolution.shared,
        degraded=result is not None and result.confidence <= OFFLINE_CONFIDENCE,
        result=LookupResultModel.from_result(result) if result is not None else None,
    )
