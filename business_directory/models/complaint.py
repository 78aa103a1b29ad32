"""Complaint models for the Business Directory service."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ComplaintStatus(str, Enum):
    """Workflow status of a complaint."""

    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    FORWARDED = "forwarded"
    BUSINESS_RESPONDED = "business_responded"
    RESOLVED = "resolved"
    CLOSED = "closed"
    REJECTED = "rejected"


class ComplaintType(str, Enum):
    """Category of a complaint."""

    QUALITY = "quality"
    BILLING = "billing"
    CUSTOMER_SERVICE = "customer_service"
    CONTRACT = "contract"
    DELIVERY = "delivery"
    ADVERTISING = "advertising"
    WARRANTY = "warranty"
    OTHER = "other"


class ComplaintPriority(str, Enum):
    """Handling priority assigned by staff."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Complaint(BaseModel):
    """Customer complaint filed against a business."""

    complaint_id: str = Field(..., description="Unique complaint identifier")
    business_id: str = Field(..., description="Business the complaint is filed against")
    submitted_by: str = Field(..., description="User who filed the complaint")
    complaint_type: ComplaintType
    complaint_summary: str = Field(..., min_length=1, max_length=200)
    complaint_details: str = Field(..., min_length=50)
    status: ComplaintStatus = Field(default=ComplaintStatus.SUBMITTED)
    priority: ComplaintPriority = Field(default=ComplaintPriority.MEDIUM)
    assigned_to: Optional[str] = None
    # Counted on the business profile whenever true, whatever the status
    visible_to_public: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ComplaintCreate(BaseModel):
    """Model for filing a new complaint."""

    business_id: str
    submitted_by: str
    complaint_type: ComplaintType
    complaint_summary: str = Field(..., min_length=1, max_length=200)
    complaint_details: str = Field(..., min_length=50)
    visible_to_public: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "business_id": "biz_3f9a1c2d7e41",
                "submitted_by": "user_51d0e2aa",
                "complaint_type": "billing",
                "complaint_summary": "Charged twice for the same inspection",
                "complaint_details": "I was billed on both the 3rd and the 10th for a single roof inspection and nobody answers the phone."
            }
        }


class ComplaintUpdate(BaseModel):
    """Staff update to a complaint's workflow fields."""

    status: Optional[ComplaintStatus] = None
    priority: Optional[ComplaintPriority] = None
    assigned_to: Optional[str] = None
    visible_to_public: Optional[bool] = None
