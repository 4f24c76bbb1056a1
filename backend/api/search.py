"""Search API: geofenced, multi-criteria location search."""
import logging
import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.locations import location_to_response
from db import get_db
from discovery_core.opening_hours import opening_status
from repositories.location_repository import aspect_ratings_by_location
from repositories.search_repository import SearchFilters, search_locations
from schemas.search import SearchLocation, SearchResponse
from utils.config import SEARCH_DEFAULT_PER_PAGE, SEARCH_DEFAULT_RADIUS_KM, SEARCH_MAX_PER_PAGE

LOG = logging.getLogger(__name__)

router = APIRouter(tags=["search"])

_TRUE_VALUES = {"true", "1", "yes", "on"}


def _parse_float(raw: str | None) -> float | None:
    """Float or None for missing, non-numeric, NaN or infinite input."""
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_int(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _parse_id_list(raw_values: list[str] | None) -> list[int]:
    """Positive integer ids from comma-separated and/or repeated parameters; other tokens dropped."""
    ids: list[int] = []
    for raw in raw_values or []:
        for token in raw.split(","):
            value = _parse_int(token)
            if value is not None and value > 0 and value not in ids:
                ids.append(value)
    return ids


def parse_search_filters(
    name: str | None = None,
    latitude: str | None = None,
    longitude: str | None = None,
    distance: str | None = None,
    category_ids: list[str] | None = None,
    aspect_ids: list[str] | None = None,
    is_open_now: str | None = None,
    page: str | None = None,
    per_page: str | None = None,
) -> SearchFilters:
    """Turn raw query strings into SearchFilters. Bad values drop out of the predicate instead of raising."""
    lat = _parse_float(latitude)
    lon = _parse_float(longitude)
    if lat is not None and not -90 <= lat <= 90:
        lat = None
    if lon is not None and not -180 <= lon <= 180:
        lon = None
    radius = None
    if lat is not None and lon is not None:
        radius = _parse_float(distance)
        if radius is None or radius <= 0:
            radius = SEARCH_DEFAULT_RADIUS_KM
    else:
        lat = lon = None

    page_num = _parse_int(page)
    if page_num is None or page_num < 1:
        page_num = 1
    size = _parse_int(per_page)
    if size is None:
        size = SEARCH_DEFAULT_PER_PAGE
    size = max(1, min(size, SEARCH_MAX_PER_PAGE))

    return SearchFilters(
        name=name.strip() if name and name.strip() else None,
        latitude=lat,
        longitude=lon,
        radius_km=radius,
        category_ids=_parse_id_list(category_ids),
        aspect_ids=_parse_id_list(aspect_ids),
        open_now=(is_open_now or "").strip().lower() in _TRUE_VALUES,
        page=page_num,
        per_page=size,
    )


@router.get("/search", response_model=SearchResponse)
def search(
    name: str | None = None,
    latitude: str | None = None,
    longitude: str | None = None,
    distance: str | None = None,
    category_ids: list[str] | None = Query(default=None, alias="categoryIds"),
    aspect_ids: list[str] | None = Query(default=None, alias="aspectIds"),
    is_open_now: str | None = Query(default=None, alias="isOpenNow"),
    page: str | None = None,
    per_page: str | None = Query(default=None, alias="perPage"),
    db: Session = Depends(get_db),
) -> SearchResponse:
    """Search locations by name, radius, categories, aspects and open-now status."""
    filters = parse_search_filters(
        name=name,
        latitude=latitude,
        longitude=longitude,
        distance=distance,
        category_ids=category_ids,
        aspect_ids=aspect_ids,
        is_open_now=is_open_now,
        page=page,
        per_page=per_page,
    )
    result = search_locations(db, filters)
    aspects = aspect_ratings_by_location(db, [hit.location.id for hit in result.hits])
    locations = [
        SearchLocation(
            **location_to_response(hit.location).model_dump(),
            reviewCount=hit.review_count,
            distance=hit.distance_km,
            aspectRatings=aspects.get(hit.location.id, {}),
            openingStatus=opening_status(hit.location.opening_hours).value,
        )
        for hit in result.hits
    ]
    return SearchResponse(
        locations=locations,
        page=filters.page,
        perPage=filters.per_page,
        total=result.total,
    )
