"""
Location search: builds one filtered query for name, radius, category and aspect
predicates, and applies the "open now" filter over the fetched rows.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy import and_, exists, func, select
from sqlalchemy.orm import Session, aliased

from discovery_core.geo import great_circle_km
from discovery_core.opening_hours import is_open_now
from models.aspect_rating import LocationAspectRating
from models.location import Location
from models.review import Review
from utils.config import ASPECT_MATCH_THRESHOLD, SEARCH_DEFAULT_PER_PAGE, SEARCH_MIN_REVIEWS


@dataclass
class SearchFilters:
    """Search predicates; every active one must hold (conjunctive)."""

    name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    radius_km: float | None = None
    category_ids: list[int] = field(default_factory=list)
    aspect_ids: list[int] = field(default_factory=list)
    open_now: bool = False
    page: int = 1
    per_page: int = SEARCH_DEFAULT_PER_PAGE

    @property
    def has_geo(self) -> bool:
        return None not in (self.latitude, self.longitude, self.radius_km)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass
class SearchHit:
    location: Location
    review_count: int
    distance_km: float | None = None


@dataclass
class SearchPage:
    hits: list[SearchHit]
    total: int


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_search_query(filters: SearchFilters):
    """Return the ordered SELECT (Location, review_count[, distance]) for the given filters."""
    review_counts = (
        select(Review.location_id.label("location_id"), func.count(Review.id).label("review_count"))
        .group_by(Review.location_id)
        .subquery()
    )
    columns = [Location, review_counts.c.review_count]
    distance = None
    if filters.has_geo:
        distance = great_circle_km(filters.latitude, filters.longitude, Location.latitude, Location.longitude)
        columns.append(distance.label("distance"))

    stmt = (
        select(*columns)
        .join(review_counts, review_counts.c.location_id == Location.id)
        .where(review_counts.c.review_count >= SEARCH_MIN_REVIEWS)
    )
    if distance is not None:
        stmt = stmt.where(distance <= filters.radius_km)
    if filters.name:
        stmt = stmt.where(Location.name.ilike(f"%{_escape_like(filters.name)}%", escape="\\"))
    if filters.category_ids:
        stmt = stmt.where(Location.category_id.in_(filters.category_ids))
    # One EXISTS per aspect: the latest generated rating of every aspect must clear the threshold.
    newer = aliased(LocationAspectRating)
    for aspect_id in dict.fromkeys(filters.aspect_ids):
        stmt = stmt.where(
            exists().where(
                and_(
                    LocationAspectRating.location_id == Location.id,
                    LocationAspectRating.aspect_id == aspect_id,
                    LocationAspectRating.rating >= ASPECT_MATCH_THRESHOLD,
                    ~exists().where(
                        and_(
                            newer.location_id == LocationAspectRating.location_id,
                            newer.aspect_id == LocationAspectRating.aspect_id,
                            newer.generated_date > LocationAspectRating.generated_date,
                        )
                    ),
                )
            )
        )

    if distance is not None:
        stmt = stmt.order_by(distance.asc(), Location.id)
    else:
        stmt = stmt.order_by(Location.rating.desc().nulls_last(), Location.id)
    return stmt


def _to_hit(row, has_geo: bool) -> SearchHit:
    return SearchHit(
        location=row[0],
        review_count=int(row[1]),
        distance_km=float(row[2]) if has_geo and row[2] is not None else None,
    )


def search_locations(session: Session, filters: SearchFilters, now: Optional[datetime] = None) -> SearchPage:
    """
    Run the search and return one page plus the total match count.

    The open-now filter cannot be expressed in SQL (hours are free text), so when it
    is requested the whole filtered set is fetched, filtered in memory, and paged
    afterwards; the total then counts only open locations.
    """
    stmt = build_search_query(filters)

    if filters.open_now:
        rows = session.execute(stmt).all()
        hits = [
            _to_hit(row, filters.has_geo)
            for row in rows
            if is_open_now(row[0].opening_hours, now)
        ]
        return SearchPage(
            hits=hits[filters.offset:filters.offset + filters.per_page],
            total=len(hits),
        )

    total = session.execute(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ).scalar() or 0
    rows = session.execute(stmt.limit(filters.per_page).offset(filters.offset)).all()
    return SearchPage(hits=[_to_hit(row, filters.has_geo) for row in rows], total=total)
