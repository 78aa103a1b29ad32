"""Complaints API router for the Business Directory service."""

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends

from business_directory.dependencies import get_change_notifier, get_document_store
from business_directory.models.complaint import Complaint, ComplaintCreate, ComplaintStatus, ComplaintUpdate
from business_directory.services.change_notifier import ChangeNotifier, ChangeOperation
from business_directory.services.document_store import Collection, DocumentStore

router = APIRouter(prefix="/api/complaints", tags=["complaints"])


@router.post("", response_model=Complaint, status_code=201)
async def create_complaint(
    complaint_data: ComplaintCreate,
    background_tasks: BackgroundTasks,
    store: DocumentStore = Depends(get_document_store),
    notifier: ChangeNotifier = Depends(get_change_notifier),
) -> Complaint:
    """
    File a complaint against a business.

    The business's public complaint count is recomputed after the
    response is sent.
    """
    await store.get(Collection.BUSINESSES, complaint_data.business_id)

    now = datetime.now(timezone.utc)
    complaint = Complaint(
        complaint_id=f"cmp_{uuid.uuid4().hex[:12]}",
        **complaint_data.model_dump(),
        status=ComplaintStatus.SUBMITTED,
        created_at=now,
        updated_at=now,
    )

    await store.create(Collection.COMPLAINTS, complaint.model_dump(mode="json"), complaint.complaint_id)

    background_tasks.add_task(notifier.on_complaint_change, None, complaint, ChangeOperation.CREATE)
    return complaint


@router.get("/{complaint_id}", response_model=Complaint)
async def get_complaint(
    complaint_id: str,
    store: DocumentStore = Depends(get_document_store),
) -> Complaint:
    """Get a complaint by ID."""
    return Complaint(**await store.get(Collection.COMPLAINTS, complaint_id))


@router.patch("/{complaint_id}", response_model=Complaint)
async def update_complaint(
    complaint_id: str,
    update: ComplaintUpdate,
    background_tasks: BackgroundTasks,
    store: DocumentStore = Depends(get_document_store),
    notifier: ChangeNotifier = Depends(get_change_notifier),
) -> Complaint:
    """
    Update a complaint's workflow fields.

    A status change on a publicly visible complaint recomputes the
    business's complaint count. Toggling visibility alone does not.
    """
    previous = Complaint(**await store.get(Collection.COMPLAINTS, complaint_id))

    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    changes["updated_at"] = datetime.now(timezone.utc)
    complaint = previous.model_copy(update=changes)

    await store.update(
        Collection.COMPLAINTS,
        complaint_id,
        complaint.model_dump(mode="json", include=set(changes)),
    )

    background_tasks.add_task(notifier.on_complaint_change, previous, complaint, ChangeOperation.UPDATE)
    return complaint
