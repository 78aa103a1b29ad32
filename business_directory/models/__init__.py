"""Pydantic models for the Business Directory service."""

from business_directory.models.business import (
    Business,
    BusinessCreate,
    BusinessSearchResult,
    BusinessStatistics,
    BusinessStatus,
)
from business_directory.models.complaint import (
    Complaint,
    ComplaintCreate,
    ComplaintPriority,
    ComplaintStatus,
    ComplaintType,
    ComplaintUpdate,
)
from business_directory.models.review import (
    Review,
    ReviewBatch,
    ReviewCreate,
    ReviewModeration,
    ReviewStatus,
)

__all__ = [
    "Business",
    "BusinessCreate",
    "BusinessSearchResult",
    "BusinessStatistics",
    "BusinessStatus",
    "Complaint",
    "ComplaintCreate",
    "ComplaintPriority",
    "ComplaintStatus",
    "ComplaintType",
    "ComplaintUpdate",
    "Review",
    "ReviewBatch",
    "ReviewCreate",
    "ReviewModeration",
    "ReviewStatus",
]
