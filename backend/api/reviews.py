"""Review API routes."""
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from db import get_db
from discovery_core.cache import invalidate_location
from models.review import SOURCE_USER, Review
from repositories.location_repository import get_location
from repositories.review_repository import delete_review, get_review, get_user_review, save_user_review
from repositories.user_repository import ensure_user
from schemas.reviews import ReviewCreate, ReviewResponse
from utils.security import CurrentUser, get_current_user

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])


def review_to_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        locationId=review.location_id,
        userId=review.user_id,
        rating=review.rating,
        body=review.body,
        source=review.source,
        extractedDate=review.extracted_date,
    )


def is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    body: ReviewCreate,
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewResponse:
    """Create the caller's review, or overwrite their previous one for this location (200)."""
    if get_location(db, body.locationId) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    ensure_user(db, user.id, user.email, user.avatar_url)
    review, created = save_user_review(
        db,
        location_id=body.locationId,
        user_id=user.id,
        rating=body.rating,
        body=body.body,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    invalidate_location(body.locationId)
    LOG.info("Review %s %s for location %s", review.id, "created" if created else "updated", body.locationId)
    return review_to_response(review)


@router.get("", response_model=ReviewResponse | None)
def get_my_review(
    location_id: str | None = Query(default=None, alias="locationId"),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewResponse | None:
    """The caller's review for a location, or null."""
    if not location_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Location ID is required")
    review = get_user_review(db, location_id, user.id)
    return review_to_response(review) if review is not None else None


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_my_review(
    review_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    """Delete one of the caller's own reviews and recompute the location rating."""
    if not is_uuid(review_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid review ID format")
    review = get_review(db, review_id)
    # Imported reviews are not deletable through the API.
    if review is None or review.source != SOURCE_USER:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    if review.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to delete this review",
        )
    location_id = review.location_id
    delete_review(db, review)
    invalidate_location(location_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
