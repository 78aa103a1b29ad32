"""Business API router for the Business Directory service."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query

from business_directory.dependencies import get_document_store
from business_directory.models.business import (
    Business,
    BusinessCreate,
    BusinessSearchResult,
    BusinessStatistics,
    BusinessStatus,
    slugify,
)
from business_directory.services.document_store import Collection, DocumentStore
from business_directory.services.view_counter import increment_view_count

router = APIRouter(prefix="/api/businesses", tags=["businesses"])


@router.get("", response_model=BusinessSearchResult)
async def list_businesses(
    q: Optional[str] = Query(None, description="Search query for business name"),
    category: Optional[str] = Query(None, description="Filter by primary category"),
    status: Optional[BusinessStatus] = Query(None, description="Filter by listing status"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Results per page"),
    store: DocumentStore = Depends(get_document_store),
) -> BusinessSearchResult:
    """
    List businesses with optional filtering and pagination.

    - **q**: Search query to match against business names
    - **category**: Filter businesses by primary category
    - **status**: Filter businesses by listing status
    """
    must_clauses = []

    if q:
        must_clauses.append({
            "match": {
                "name": {
                    "query": q,
                    "fuzziness": "AUTO"
                }
            }
        })

    if category:
        must_clauses.append({"match": {"primary_category": category}})

    if status:
        must_clauses.append({"term": {"status": status.value}})

    query = {"match_all": {}} if not must_clauses else {"bool": {"must": must_clauses}}

    result = await store.search(
        Collection.BUSINESSES,
        query,
        size=page_size,
        from_=(page - 1) * page_size,
        sort=[{"statistics.total_reviews": "desc"}],
    )

    return BusinessSearchResult(
        businesses=[Business(**doc) for doc in result.documents],
        total=result.total_count,
        page=page,
        page_size=page_size
    )


@router.post("", response_model=Business, status_code=201)
async def create_business(
    business_data: BusinessCreate,
    store: DocumentStore = Depends(get_document_store),
) -> Business:
    """Create a business listing with empty statistics."""
    slug = business_data.slug or slugify(business_data.name)

    existing = await store.find(Collection.BUSINESSES, {"slug": slug}, size=0)
    if existing.total_count:
        raise HTTPException(status_code=409, detail=f"Slug '{slug}' is already in use")

    now = datetime.now(timezone.utc)
    business = Business(
        business_id=f"biz_{uuid.uuid4().hex[:12]}",
        **business_data.model_dump(exclude={"slug"}),
        slug=slug,
        statistics=BusinessStatistics(),
        created_at=now,
        updated_at=now,
    )

    await store.create(
        Collection.BUSINESSES,
        business.model_dump(mode="json"),
        business.business_id,
    )
    return business


@router.get("/slug/{slug}", response_model=Business)
async def get_business_by_slug(
    slug: str,
    background_tasks: BackgroundTasks,
    store: DocumentStore = Depends(get_document_store),
) -> Business:
    """Get a business by its URL slug. Counts as a public profile view."""
    result = await store.find(Collection.BUSINESSES, {"slug": slug}, size=1)
    if not result.documents:
        raise HTTPException(status_code=404, detail=f"Business '{slug}' not found")

    business = Business(**result.documents[0])
    background_tasks.add_task(increment_view_count, store, business.business_id)
    return business


@router.get("/{business_id}", response_model=Business)
async def get_business(
    business_id: str,
    background_tasks: BackgroundTasks,
    store: DocumentStore = Depends(get_document_store),
) -> Business:
    """
    Get a specific business by ID.

    Each public read adds one to the business's view count once the
    response has been sent.
    """
    business = Business(**await store.get(Collection.BUSINESSES, business_id))
    background_tasks.add_task(increment_view_count, store, business_id)
    return business
