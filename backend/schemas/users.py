"""Pydantic schemas for user API."""
from datetime import datetime

from pydantic import BaseModel


class UserResponse(BaseModel):
    """Local user mirror."""

    id: str
    email: str | None = None
    avatarUrl: str | None = None
    createdAt: datetime


class UserEnvelope(BaseModel):
    user: UserResponse
