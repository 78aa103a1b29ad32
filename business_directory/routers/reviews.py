"""Reviews API router for the Business Directory service."""

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query

from business_directory.dependencies import get_change_notifier, get_document_store
from business_directory.models.review import (
    Review,
    ReviewBatch,
    ReviewCreate,
    ReviewModeration,
    ReviewStatus,
)
from business_directory.services.change_notifier import ChangeNotifier, ChangeOperation
from business_directory.services.document_store import Collection, DocumentStore

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("", response_model=ReviewBatch)
async def list_reviews(
    business_id: str = Query(..., description="Business whose reviews to list"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Results per page"),
    store: DocumentStore = Depends(get_document_store),
) -> ReviewBatch:
    """
    List the approved reviews of a business, newest first.

    Pending, rejected and flagged reviews are never listed publicly.
    """
    result = await store.find(
        Collection.REVIEWS,
        {"business_id": business_id, "status": ReviewStatus.APPROVED},
        size=page_size,
        from_=(page - 1) * page_size,
        sort=[{"created_at": "desc"}],
    )

    return ReviewBatch(
        reviews=[Review(**doc) for doc in result.documents],
        total=result.total_count,
        business_id=business_id
    )


@router.post("", response_model=Review, status_code=201)
async def create_review(
    review_data: ReviewCreate,
    background_tasks: BackgroundTasks,
    store: DocumentStore = Depends(get_document_store),
    notifier: ChangeNotifier = Depends(get_change_notifier),
) -> Review:
    """
    Submit a new review.

    Reviews start out pending and only affect the business's rating once a
    moderator approves them.
    """
    # The business must exist before anything can attach to it
    await store.get(Collection.BUSINESSES, review_data.business_id)

    now = datetime.now(timezone.utc)
    review = Review(
        review_id=f"rev_{uuid.uuid4().hex[:12]}",
        **review_data.model_dump(),
        status=ReviewStatus.PENDING,
        created_at=now,
        updated_at=now,
    )

    await store.create(Collection.REVIEWS, review.model_dump(mode="json"), review.review_id)

    background_tasks.add_task(notifier.on_review_change, None, review, ChangeOperation.CREATE)
    return review


@router.get("/{review_id}", response_model=Review)
async def get_review(
    review_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> Review:
    """Get an approved review by ID."""
    review = Review(**await store.get(Collection.REVIEWS, review_id))
    if review.status != ReviewStatus.APPROVED:
        raise HTTPException(status_code=404, detail=f"Review {review_id} not found")
    return review


@router.patch("/{review_id}/moderation", response_model=Review)
async def moderate_review(
    review_id: str,
    moderation: ReviewModeration,
    background_tasks: BackgroundTasks,
    store: DocumentStore = Depends(get_document_store),
    notifier: ChangeNotifier = Depends(get_change_notifier),
) -> Review:
    """
    Record a moderation decision on a review.

    Approving a review recomputes the business's rating statistics after
    the response is sent.
    """
    previous = Review(**await store.get(Collection.REVIEWS, review_id))

    now = datetime.now(timezone.utc)
    changes = moderation.model_dump(exclude_unset=True)
    changes["reviewed_at"] = now
    changes["updated_at"] = now
    review = previous.model_copy(update=changes)

    await store.update(
        Collection.REVIEWS,
        review_id,
        review.model_dump(mode="json", include=set(changes)),
    )

    background_tasks.add_task(notifier.on_review_change, previous, review, ChangeOperation.UPDATE)
    return review
