"""Business models for the Business Directory service."""

import re
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


def slugify(name: str) -> str:
    """Build a URL-friendly slug from a business name."""
    slug = re.sub(r"[^\w\s-]", "", name.lower())
    return re.sub(r"\s+", "-", slug)


class BusinessStatus(str, Enum):
    """Publication status of a business listing."""

    DRAFT = "draft"
    PUBLISHED = "published"
    UNDER_REVIEW = "under_review"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"


class BusinessStatistics(BaseModel):
    """Denormalized counters derived from a business's reviews and complaints."""

    average_rating: float = Field(default=0.0, ge=0.0, le=5.0, description="Mean rating of approved reviews")
    total_reviews: int = Field(default=0, ge=0, description="Number of approved reviews")
    total_complaints: int = Field(default=0, ge=0, description="Number of publicly visible complaints")
    view_count: int = Field(default=0, ge=0, description="Public profile views")


class Business(BaseModel):
    """A directory listing that reviews and complaints attach to."""

    business_id: str = Field(..., description="Unique business identifier")
    name: str = Field(..., description="Business name")
    slug: Optional[str] = Field(default=None, description="URL-friendly identifier")
    primary_category: Optional[str] = Field(default=None, description="Primary business type")
    about_business: Optional[str] = Field(default=None, description="Short description")
    status: BusinessStatus = Field(default=BusinessStatus.DRAFT)
    featured: bool = False
    verified: bool = False
    owner_id: Optional[str] = None
    statistics: BusinessStatistics = Field(default_factory=BusinessStatistics)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def fill_slug(self) -> "Business":
        """Derive the slug from the name when none was stored."""
        if not self.slug:
            self.slug = slugify(self.name)
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "business_id": "biz_3f9a1c2d7e41",
                "name": "FG Roofing, Inc.",
                "slug": "fg-roofing-inc",
                "primary_category": "Roofing Contractors",
                "status": "published",
                "statistics": {
                    "average_rating": 4.25,
                    "total_reviews": 12,
                    "total_complaints": 2,
                    "view_count": 340
                }
            }
        }


class BusinessCreate(BaseModel):
    """Model for creating a new business. Statistics are never accepted from clients."""

    name: str = Field(..., min_length=1, description="Business name")
    slug: Optional[str] = Field(default=None, description="URL slug (derived from name if omitted)")
    primary_category: str = Field(..., min_length=1)
    about_business: str = Field(..., min_length=1)
    status: BusinessStatus = Field(default=BusinessStatus.DRAFT)
    featured: bool = False
    verified: bool = False
    owner_id: Optional[str] = None


class BusinessSearchResult(BaseModel):
    """Search result for businesses."""

    businesses: List[Business]
    total: int
    page: int = 1
    page_size: int = 10
