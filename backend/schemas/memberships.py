"""Pydantic schemas for favorites and route stops."""
from datetime import datetime

from pydantic import BaseModel, Field


class MembershipCreate(BaseModel):
    """Payload for adding a location to favorites or the route."""

    locationId: str = Field(..., min_length=1)


class MembershipItem(BaseModel):
    """Entry in GET /favorites and GET /routes."""

    locationId: str


class MembershipResponse(BaseModel):
    """Created favorite or route stop."""

    id: str
    userId: str
    locationId: str
    createdAt: datetime


class SuccessResponse(BaseModel):
    success: bool = True
