"""Pydantic schemas for location API."""
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class NamedItem(BaseModel):
    """Category or aspect."""

    id: int
    name: str


class HoursGroupResponse(BaseModel):
    """Consecutive days sharing the same hours."""

    days: list[str]
    label: str
    hours: str


class AspectRatingResponse(BaseModel):
    """Aspect rating on a location detail."""

    id: str
    aspectId: int
    aspectName: str
    rating: int
    generatedDate: date


class ReviewAuthor(BaseModel):
    email: str | None = None
    avatarUrl: str | None = None


class LocationReviewResponse(BaseModel):
    """Review as shown on a location detail."""

    id: str
    rating: int
    body: str
    source: str
    extractedDate: datetime
    userId: str | None = None
    user: ReviewAuthor | None = None


class LocationResponse(BaseModel):
    """Location in list responses."""

    id: str
    name: str
    latitude: float
    longitude: float
    address: str | None = None
    categoryId: int | None = None
    rating: float | None = None
    image: str | None = None
    summarizedReview: str | None = None


class LocationDetail(LocationResponse):
    """Location with hours, aspect ratings and recent reviews."""

    category: NamedItem | None = None
    openingHours: Any = "N/A"
    openingStatus: str
    groupedHours: list[HoursGroupResponse] = Field(default_factory=list)
    aspectRatings: list[AspectRatingResponse] = Field(default_factory=list)
    siteReviews: list[LocationReviewResponse] = Field(default_factory=list)
    reviewCount: int = 0


class LocationBatchRequest(BaseModel):
    """Payload for fetching several locations at once."""

    locationIds: list[str]
