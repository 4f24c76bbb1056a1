"""Pydantic schemas for report API."""
from datetime import datetime

from pydantic import BaseModel, Field


class ReportCreate(BaseModel):
    """Payload for reporting a location."""

    locationId: str = Field(..., min_length=1)
    body: str = Field(..., min_length=10, max_length=1000)


class ReportLocation(BaseModel):
    name: str
    image: str | None = None


class ReportUser(BaseModel):
    email: str | None = None
    avatarUrl: str | None = None


class ReportResponse(BaseModel):
    """Report in API responses."""

    id: str
    locationId: str
    userId: str
    body: str
    created: datetime
    location: ReportLocation | None = None
    user: ReportUser | None = None


class MessageResponse(BaseModel):
    message: str
