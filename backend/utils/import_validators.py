"""Validate location and review rows for import."""
import math
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from discovery_core.opening_hours import NOT_AVAILABLE
from repositories.location_repository import get_location

REVIEW_BODY_MIN = 10
REVIEW_BODY_MAX = 1000


def _get_str(row: dict[str, Any], key: str) -> str | None:
    """Get string value; empty string treated as missing."""
    v = row.get(key)
    if v is None:
        return None
    s = str(v).strip()
    return s if s else None


def _get_float(row: dict[str, Any], key: str) -> float | None:
    """Get float from row; return None if missing, invalid, NaN or infinite."""
    v = row.get(key)
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    try:
        value = float(v)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _get_rating(row: dict[str, Any], key: str) -> int | None:
    """Whole-star rating 1..5; None if missing, fractional or out of range."""
    value = _get_float(row, key)
    if value is None or value != int(value):
        return None
    n = int(value)
    return n if 1 <= n <= 5 else None


def _normalize_hours(value: Any) -> tuple[bool, Any]:
    if value is None or value == "" or value == NOT_AVAILABLE:
        return True, NOT_AVAILABLE
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return True, [v.strip() for v in value if v.strip()] or NOT_AVAILABLE
    return False, None


def validate_location_row(row: dict[str, Any], db: Session) -> tuple[bool, dict[str, Any] | None, str]:
    """
    Validate a location row. Returns (ok, normalized_dict, error_message).
    normalized_dict carries category/aspect names; the caller resolves them to ids.
    """
    name = _get_str(row, "name")
    if not name:
        return False, None, "name is required"
    latitude = _get_float(row, "latitude")
    longitude = _get_float(row, "longitude")
    if latitude is None or not -90 <= latitude <= 90:
        return False, None, "latitude must be a number between -90 and 90"
    if longitude is None or not -180 <= longitude <= 180:
        return False, None, "longitude must be a number between -180 and 180"

    location_id = _get_str(row, "id")
    if location_id and get_location(db, location_id) is not None:
        return False, None, f"Location id already exists: {location_id}"

    ok, hours = _normalize_hours(row.get("opening_hours"))
    if not ok:
        return False, None, "opening_hours must be a list of strings or \"N/A\""

    aspect_ratings: dict[str, float] = {}
    raw_aspects = row.get("aspect_ratings") or {}
    if not isinstance(raw_aspects, dict):
        return False, None, "aspect_ratings must be an object of aspect name to rating"
    for aspect_name, raw_rating in raw_aspects.items():
        rating = _get_float({"r": raw_rating}, "r")
        if not str(aspect_name).strip() or rating is None or not 0 <= rating <= 5:
            return False, None, f"Invalid aspect rating for {aspect_name!r}"
        aspect_ratings[str(aspect_name).strip()] = rating

    return True, {
        "id": location_id,
        "name": name,
        "latitude": latitude,
        "longitude": longitude,
        "category": _get_str(row, "category"),
        "address": _get_str(row, "address"),
        "image": _get_str(row, "image"),
        "summarized_review": _get_str(row, "summarized_review"),
        "opening_hours": hours,
        "aspect_ratings": aspect_ratings,
    }, ""


def validate_review_row(row: dict[str, Any], db: Session) -> tuple[bool, dict[str, Any] | None, str]:
    """Validate an imported review row. Returns (ok, normalized_dict, error_message)."""
    location_id = _get_str(row, "location_id")
    if not location_id:
        return False, None, "location_id is required"
    if get_location(db, location_id) is None:
        return False, None, f"Location not found: {location_id}"
    rating = _get_rating(row, "rating")
    if rating is None:
        return False, None, "rating must be a whole number from 1 to 5"
    body = _get_str(row, "body")
    if body is None or not REVIEW_BODY_MIN <= len(body) <= REVIEW_BODY_MAX:
        return False, None, f"body must be {REVIEW_BODY_MIN}-{REVIEW_BODY_MAX} characters"

    extracted_date = None
    raw_date = _get_str(row, "extracted_date")
    if raw_date:
        try:
            extracted_date = datetime.fromisoformat(raw_date.replace("Z", "+00:00"))
        except ValueError:
            return False, None, "extracted_date must be an ISO 8601 timestamp"
        if extracted_date.tzinfo is None:
            extracted_date = extracted_date.replace(tzinfo=timezone.utc)

    return True, {
        "location_id": location_id,
        "rating": rating,
        "body": body,
        "extracted_date": extracted_date,
    }, ""
