"""Admin API routes for directory maintenance."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from business_directory.dependencies import get_document_store, get_recalculator
from business_directory.models.business import Business
from business_directory.services.business_stats import AggregateRecalculator
from business_directory.services.document_store import Collection, DocumentStore

router = APIRouter(prefix="/api/admin", tags=["admin"])


class RecomputeResponse(BaseModel):
    """Statistics written by a recomputation."""
    business_id: str
    average_rating: float
    total_reviews: int
    total_complaints: int


class RebuildRequest(BaseModel):
    """Businesses to rebuild. An empty list rebuilds every business."""
    business_ids: List[str] = Field(default_factory=list)


class RebuildResult(BaseModel):
    """Outcome for one business in a rebuild."""
    success: bool
    business_id: str
    average_rating: Optional[float] = None
    total_reviews: Optional[int] = None
    total_complaints: Optional[int] = None
    error: Optional[str] = None


class RebuildResponse(BaseModel):
    """Response from a statistics rebuild."""
    success: bool
    rebuilt: int
    failed: int
    results: List[RebuildResult]


@router.get("/businesses/{business_id}", response_model=Business)
async def get_business(
    business_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> Business:
    """Get a business without counting a profile view."""
    return Business(**await store.get(Collection.BUSINESSES, business_id))


@router.post("/businesses/{business_id}/recompute", response_model=RecomputeResponse)
async def recompute_business(
    business_id: str,
    store: DocumentStore = Depends(get_document_store),
    recalculator: AggregateRecalculator = Depends(get_recalculator),
) -> RecomputeResponse:
    """
    Recompute a business's review and complaint statistics now.

    Repairs statistics left stale by a failed trigger or by a review
    that left the approved state.
    """
    await store.get(Collection.BUSINESSES, business_id)
    stats = await recalculator.recompute_all(business_id)
    return RecomputeResponse(business_id=business_id, **stats)


@router.post("/statistics/rebuild", response_model=RebuildResponse)
async def rebuild_statistics(
    request: RebuildRequest,
    store: DocumentStore = Depends(get_document_store),
    recalculator: AggregateRecalculator = Depends(get_recalculator),
) -> RebuildResponse:
    """
    Recompute statistics for several businesses.

    - **business_ids**: Businesses to rebuild; leave empty to rebuild all
    """
    business_ids = request.business_ids
    if not business_ids:
        business_ids = [business_id async for business_id in store.scan_ids(Collection.BUSINESSES)]

    results = [RebuildResult(**r) for r in await recalculator.recompute_many(business_ids)]
    failed = sum(1 for r in results if not r.success)

    return RebuildResponse(
        success=failed == 0,
        rebuilt=len(results) - failed,
        failed=failed,
        results=results,
    )
