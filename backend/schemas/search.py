"""Pydantic schemas for search API."""
from pydantic import BaseModel, Field

from schemas.locations import LocationResponse


class SearchLocation(LocationResponse):
    """Location in search results."""

    reviewCount: int
    distance: float | None = None
    aspectRatings: dict[str, float] = Field(default_factory=dict)
    openingStatus: str


class SearchResponse(BaseModel):
    """One page of search results."""

    locations: list[SearchLocation]
    page: int
    perPage: int
    total: int
