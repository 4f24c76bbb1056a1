"""Pydantic schemas for review API."""
from datetime import datetime

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    """Payload for creating (or overwriting) the caller's review."""

    locationId: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    body: str = Field(..., min_length=10, max_length=1000)


class ReviewResponse(BaseModel):
    """Review in API responses."""

    id: str
    locationId: str
    userId: str | None = None
    rating: int
    body: str
    source: str
    extractedDate: datetime
