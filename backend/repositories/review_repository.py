"""Review repository: create/overwrite/delete reviews with the location aggregate kept in step."""
from datetime import datetime, timezone
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.location import Location
from models.review import SOURCE_EXTERNAL, SOURCE_USER, Review

LOG = logging.getLogger(__name__)


def get_review(session: Session, review_id: str) -> Optional[Review]:
    """Return review by id or None."""
    return session.get(Review, review_id)


def get_user_review(session: Session, location_id: str, user_id: str) -> Optional[Review]:
    """Return the user-sourced review this author left for this location, or None."""
    return session.execute(
        select(Review)
        .where(
            Review.location_id == location_id,
            Review.user_id == user_id,
            Review.source == SOURCE_USER,
        )
        .order_by(Review.extracted_date.desc())
        .limit(1)
    ).scalar_one_or_none()


def recompute_location_rating(session: Session, location_id: str) -> float | None:
    """Set location.rating to the mean of its reviews (None when it has none). Does not commit."""
    avg = session.execute(
        select(func.avg(Review.rating)).where(Review.location_id == location_id)
    ).scalar()
    location = session.get(Location, location_id)
    if location is None:
        return None
    location.rating = float(avg) if avg is not None else None
    session.flush()
    return location.rating


def _write_user_review(
    session: Session,
    location_id: str,
    user_id: str,
    rating: int,
    body: str,
) -> tuple[Review, bool]:
    """Insert or overwrite the author's review and recompute the aggregate; commits."""
    review = get_user_review(session, location_id, user_id)
    created = review is None
    if created:
        review = Review(
            location_id=location_id,
            user_id=user_id,
            rating=rating,
            body=body,
            source=SOURCE_USER,
        )
        session.add(review)
    else:
        review.rating = rating
        review.body = body
        review.extracted_date = datetime.now(timezone.utc)
    session.flush()
    recompute_location_rating(session, location_id)
    session.commit()
    return review, created


def save_user_review(
    session: Session,
    *,
    location_id: str,
    user_id: str,
    rating: int,
    body: str,
) -> tuple[Review, bool]:
    """
    Create the author's review for a location, or overwrite their existing one in place.
    The review write and the aggregate update commit together or not at all.
    If a concurrent request inserted the author's review first, that one is overwritten.
    Returns (review, created).
    """
    try:
        review, created = _write_user_review(session, location_id, user_id, rating, body)
    except IntegrityError:
        session.rollback()
        LOG.info("Review by %s for %s already exists; overwriting", user_id, location_id)
        try:
            review, created = _write_user_review(session, location_id, user_id, rating, body)
        except SQLAlchemyError:
            session.rollback()
            raise
    except SQLAlchemyError:
        session.rollback()
        raise
    session.refresh(review)
    return review, created


def add_external_review(
    session: Session,
    *,
    location_id: str,
    rating: int,
    body: str,
    extracted_date: datetime | None = None,
) -> Review:
    """Store an imported review (no author) and recompute the aggregate in the same commit."""
    try:
        review = Review(
            location_id=location_id,
            user_id=None,
            rating=rating,
            body=body,
            source=SOURCE_EXTERNAL,
            extracted_date=extracted_date or datetime.now(timezone.utc),
        )
        session.add(review)
        session.flush()
        recompute_location_rating(session, location_id)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
    session.refresh(review)
    return review


def delete_review(session: Session, review: Review) -> float | None:
    """Delete a review and recompute its location's aggregate atomically. Returns the new rating."""
    location_id = review.location_id
    try:
        session.delete(review)
        session.flush()
        rating = recompute_location_rating(session, location_id)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
    return rating
