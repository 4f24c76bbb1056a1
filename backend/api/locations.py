"""Location API routes: detail, batch lookup, categories and aspects."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from db import get_db, with_db_retry
from discovery_core.cache import app_cache, location_key
from discovery_core.opening_hours import group_hours, opening_status
from models.location import Location
from models.review import Review
from repositories.location_repository import (
    count_reviews,
    get_location,
    get_locations_by_ids,
    list_aspect_ratings,
    list_aspects,
    list_categories,
    list_recent_reviews,
)
from schemas.locations import (
    AspectRatingResponse,
    HoursGroupResponse,
    LocationBatchRequest,
    LocationDetail,
    LocationResponse,
    LocationReviewResponse,
    NamedItem,
    ReviewAuthor,
)

LOG = logging.getLogger(__name__)

router = APIRouter(tags=["locations"])

CATEGORIES_KEY = "categories"
ASPECTS_KEY = "aspects"


def location_to_response(loc: Location) -> LocationResponse:
    """Build LocationResponse from a Location row."""
    return LocationResponse(
        id=loc.id,
        name=loc.name,
        latitude=loc.latitude,
        longitude=loc.longitude,
        address=loc.address,
        categoryId=loc.category_id,
        rating=loc.rating,
        image=loc.image,
        summarizedReview=loc.summarized_review,
    )


def _review_to_response(review: Review) -> LocationReviewResponse:
    author = None
    if review.user is not None:
        author = ReviewAuthor(email=review.user.email, avatarUrl=review.user.avatar_url)
    return LocationReviewResponse(
        id=review.id,
        rating=review.rating,
        body=review.body,
        source=review.source,
        extractedDate=review.extracted_date,
        userId=review.user_id,
        user=author,
    )


def build_location_detail(db: Session, loc: Location, now: Optional[datetime] = None) -> LocationDetail:
    """Location detail with grouped hours, current status, aspect ratings and recent reviews."""
    base = location_to_response(loc)
    return LocationDetail(
        **base.model_dump(),
        category=NamedItem(id=loc.category.id, name=loc.category.name) if loc.category else None,
        openingHours=loc.opening_hours,
        openingStatus=opening_status(loc.opening_hours, now).value,
        groupedHours=[
            HoursGroupResponse(days=list(g.days), label=g.label, hours=g.hours)
            for g in group_hours(loc.opening_hours)
        ],
        aspectRatings=[
            AspectRatingResponse(
                id=ar.id,
                aspectId=ar.aspect_id,
                aspectName=ar.aspect.name,
                # Whole stars for display.
                rating=round(ar.rating),
                generatedDate=ar.generated_date,
            )
            for ar in list_aspect_ratings(db, loc.id)
        ],
        siteReviews=[_review_to_response(r) for r in list_recent_reviews(db, loc.id, limit=10)],
        reviewCount=count_reviews(db, loc.id),
    )


@router.get("/locations/{location_id}", response_model=LocationDetail)
def get_location_detail(location_id: str, db: Session = Depends(get_db)) -> LocationDetail:
    """Location detail; cached per location until a review or report changes it."""
    key = location_key(location_id)
    cached = app_cache.get(key)
    if cached is not None:
        detail = LocationDetail.model_validate(cached)
        # Status depends on the clock, not on stored data.
        detail.openingStatus = opening_status(detail.openingHours).value
        return detail
    loc = with_db_retry(db, lambda: get_location(db, location_id))
    if loc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    detail = build_location_detail(db, loc)
    app_cache.set(key, detail.model_dump(mode="json"))
    return detail


@router.post("/locations/batch", response_model=list[LocationResponse])
def get_locations_batch(body: LocationBatchRequest, db: Session = Depends(get_db)) -> list[LocationResponse]:
    """Fetch several locations by id (duplicates collapsed, unknown ids skipped)."""
    locations = with_db_retry(db, lambda: get_locations_by_ids(db, body.locationIds))
    return [location_to_response(loc) for loc in locations]


@router.get("/categories", response_model=list[NamedItem])
def get_categories(db: Session = Depends(get_db)) -> list[NamedItem]:
    """List location categories."""
    cached = app_cache.get(CATEGORIES_KEY)
    if cached is not None:
        return [NamedItem.model_validate(c) for c in cached]
    items = [NamedItem(id=c.id, name=c.name) for c in with_db_retry(db, lambda: list_categories(db))]
    app_cache.set(CATEGORIES_KEY, [i.model_dump() for i in items])
    return items


@router.get("/aspects", response_model=list[NamedItem])
def get_aspects(db: Session = Depends(get_db)) -> list[NamedItem]:
    """List rateable aspects."""
    cached = app_cache.get(ASPECTS_KEY)
    if cached is not None:
        return [NamedItem.model_validate(a) for a in cached]
    items = [NamedItem(id=a.id, name=a.name) for a in with_db_retry(db, lambda: list_aspects(db))]
    app_cache.set(ASPECTS_KEY, [i.model_dump() for i in items])
    return items
