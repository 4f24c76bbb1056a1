"""Location repository: lookups, catalogue writes, categories and aspects."""
import uuid
from datetime import date
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.aspect_rating import LocationAspectRating
from models.category import Aspect, LocationCategory
from models.location import Location
from models.review import Review


def get_location(session: Session, location_id: str) -> Optional[Location]:
    """Return a location by id or None."""
    return session.get(Location, location_id)


def get_locations_by_ids(session: Session, location_ids: list[str]) -> list[Location]:
    """Return the locations with the given ids (duplicates ignored, unknown ids skipped)."""
    unique_ids = list(dict.fromkeys(location_ids))
    if not unique_ids:
        return []
    result = session.execute(select(Location).where(Location.id.in_(unique_ids)))
    by_id = {loc.id: loc for loc in result.scalars().all()}
    return [by_id[i] for i in unique_ids if i in by_id]


def create_location(
    session: Session,
    name: str,
    latitude: float,
    longitude: float,
    location_id: str | None = None,
    *,
    category_id: int | None = None,
    address: str | None = None,
    opening_hours: Any = "N/A",
    image: str | None = None,
    summarized_review: str | None = None,
    rating: float | None = None,
    commit: bool = True,
) -> Location:
    """
    Create a location and return it. Id is generated if not provided.
    With commit=False the row is only flushed, leaving the caller to commit.
    """
    loc = Location(
        id=location_id or str(uuid.uuid4()),
        name=name,
        latitude=latitude,
        longitude=longitude,
        category_id=category_id,
        address=address,
        opening_hours=opening_hours,
        image=image,
        summarized_review=summarized_review,
        rating=rating,
    )
    session.add(loc)
    if commit:
        session.commit()
        session.refresh(loc)
    else:
        session.flush()
    return loc


def list_categories(session: Session) -> list[LocationCategory]:
    return list(session.execute(select(LocationCategory).order_by(LocationCategory.id)).scalars().all())


def list_aspects(session: Session) -> list[Aspect]:
    return list(session.execute(select(Aspect).order_by(Aspect.id)).scalars().all())


def get_or_create_category(session: Session, name: str) -> LocationCategory:
    """Return the category with this name, creating it (flushed, not committed) if missing."""
    category = session.execute(
        select(LocationCategory).where(LocationCategory.name == name)
    ).scalar_one_or_none()
    if category is None:
        category = LocationCategory(name=name)
        session.add(category)
        session.flush()
    return category


def get_or_create_aspect(session: Session, name: str) -> Aspect:
    """Return the aspect with this name, creating it (flushed, not committed) if missing."""
    aspect = session.execute(select(Aspect).where(Aspect.name == name)).scalar_one_or_none()
    if aspect is None:
        aspect = Aspect(name=name)
        session.add(aspect)
        session.flush()
    return aspect


def set_aspect_rating(
    session: Session,
    location_id: str,
    aspect_id: int,
    rating: float,
    generated_date: date | None = None,
    *,
    commit: bool = True,
) -> LocationAspectRating:
    """Store the rating of one aspect for a location, replacing the one from the same generation date."""
    generated_date = generated_date or date.today()
    row = session.execute(
        select(LocationAspectRating).where(
            LocationAspectRating.location_id == location_id,
            LocationAspectRating.aspect_id == aspect_id,
            LocationAspectRating.generated_date == generated_date,
        )
    ).scalar_one_or_none()
    if row is None:
        row = LocationAspectRating(
            location_id=location_id,
            aspect_id=aspect_id,
            rating=rating,
            generated_date=generated_date,
        )
        session.add(row)
    else:
        row.rating = rating
    if commit:
        session.commit()
        session.refresh(row)
    else:
        session.flush()
    return row


def list_aspect_ratings(session: Session, location_id: str) -> list[LocationAspectRating]:
    """Aspect ratings of a location, latest generation first."""
    result = session.execute(
        select(LocationAspectRating)
        .where(LocationAspectRating.location_id == location_id)
        .order_by(LocationAspectRating.generated_date.desc(), LocationAspectRating.aspect_id)
    )
    return list(result.scalars().all())


def aspect_ratings_by_location(session: Session, location_ids: list[str]) -> dict[str, dict[str, float]]:
    """Map location id -> {aspect name: rating}, keeping the latest generation per aspect."""
    if not location_ids:
        return {}
    result = session.execute(
        select(LocationAspectRating.location_id, Aspect.name, LocationAspectRating.rating)
        .join(Aspect, Aspect.id == LocationAspectRating.aspect_id)
        .where(LocationAspectRating.location_id.in_(location_ids))
        .order_by(LocationAspectRating.generated_date)
    )
    out: dict[str, dict[str, float]] = {}
    for location_id, aspect_name, rating in result.all():
        out.setdefault(location_id, {})[aspect_name] = rating
    return out


def list_recent_reviews(session: Session, location_id: str, limit: int = 10) -> list[Review]:
    """Most recent reviews of a location, newest first."""
    result = session.execute(
        select(Review)
        .where(Review.location_id == location_id)
        .order_by(Review.extracted_date.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


def count_reviews(session: Session, location_id: str) -> int:
    result = session.execute(
        select(func.count()).select_from(Review).where(Review.location_id == location_id)
    )
    return result.scalar() or 0
