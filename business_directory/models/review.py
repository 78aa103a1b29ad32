"""Review models for the Business Directory service."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ReviewStatus(str, Enum):
    """Moderation status of a review. Only approved reviews count toward ratings."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FLAGGED = "flagged"


class Review(BaseModel):
    """Customer review of a business."""

    review_id: str = Field(..., description="Unique review identifier")
    business_id: str = Field(..., description="Business being reviewed")
    user_id: str = Field(..., description="User who submitted the review")
    rating: int = Field(..., ge=1, le=5, description="Overall experience rating")
    review_text: str = Field(..., min_length=10, max_length=2000)
    terms_accepted: bool = False
    status: ReviewStatus = Field(default=ReviewStatus.PENDING)

    # Moderation
    moderation_notes: Optional[str] = None
    reviewed_by: Optional[str] = Field(default=None, description="Staff member who moderated the review")
    reviewed_at: Optional[datetime] = None

    # Engagement
    helpful_count: int = Field(default=0, ge=0)
    reported_count: int = Field(default=0, ge=0)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "review_id": "rev_8c1e2b7d4a90",
                "business_id": "biz_3f9a1c2d7e41",
                "user_id": "user_51d0e2aa",
                "rating": 4,
                "review_text": "Crew showed up on time and fixed the leak in one visit.",
                "terms_accepted": True,
                "status": "approved"
            }
        }


class ReviewCreate(BaseModel):
    """Model for submitting a new review."""

    business_id: str = Field(..., description="Business to review")
    user_id: str = Field(..., description="Submitting user")
    rating: int = Field(..., ge=1, le=5)
    review_text: str = Field(..., min_length=10, max_length=2000)
    terms_accepted: bool = Field(..., description="Customer review submission terms accepted")

    @field_validator("terms_accepted")
    @classmethod
    def require_terms(cls, v: bool) -> bool:
        if not v:
            raise ValueError("Review submission terms must be accepted")
        return v


class ReviewModeration(BaseModel):
    """Staff moderation decision for a review."""

    status: ReviewStatus
    moderation_notes: Optional[str] = None
    reviewed_by: Optional[str] = None


class ReviewBatch(BaseModel):
    """Batch of reviews for list operations."""

    reviews: list[Review]
    total: int
    business_id: Optional[str] = None
