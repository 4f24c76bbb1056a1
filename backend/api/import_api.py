"""Import API: catalogue uploads for locations and externally-sourced reviews."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db import get_db
from discovery_core.cache import app_cache, invalidate_location
from models.location import Location
from repositories.location_repository import (
    create_location as repo_create_location,
    get_or_create_aspect,
    get_or_create_category,
    set_aspect_rating,
)
from repositories.review_repository import add_external_review
from schemas.imports import ImportFailure, ImportResult
from utils.import_parsers import parse_upload
from utils.import_validators import validate_location_row, validate_review_row
from utils.security import require_import_key

LOG = logging.getLogger(__name__)

LOCATIONS_CSV_TEMPLATE = (
    "id,name,latitude,longitude,category,address,image,summarized_review,opening_hours,aspect_ratings\n"
    ",Navy Pier,41.8917,-87.6086,Landmark,600 E Grand Ave,,,"
    "\"Monday: 10:00 AM – 8:00 PM|Tuesday: 10:00 AM – 8:00 PM\",Views=4.5;Safety=4\n"
)
LOCATIONS_JSON_TEMPLATE = """[
  {
    "name": "Navy Pier",
    "latitude": 41.8917,
    "longitude": -87.6086,
    "category": "Landmark",
    "address": "600 E Grand Ave",
    "opening_hours": ["Monday: 10:00 AM – 8:00 PM", "Tuesday: 10:00 AM – 8:00 PM"],
    "aspect_ratings": {"Views": 4.5, "Safety": 4}
  }
]
"""
REVIEWS_CSV_TEMPLATE = "location_id,rating,body,extracted_date\n"
REVIEWS_JSON_TEMPLATE = """[
  {
    "location_id": "00000000-0000-0000-0000-000000000000",
    "rating": 5,
    "body": "Great views of the skyline at sunset.",
    "extracted_date": "2024-05-01T18:30:00Z"
  }
]
"""

TEMPLATES: dict[str, tuple[str, str]] = {
    "locations.csv": (LOCATIONS_CSV_TEMPLATE, "text/csv"),
    "locations.json": (LOCATIONS_JSON_TEMPLATE, "application/json"),
    "reviews.csv": (REVIEWS_CSV_TEMPLATE, "text/csv"),
    "reviews.json": (REVIEWS_JSON_TEMPLATE, "application/json"),
}

router = APIRouter(prefix="/import", tags=["import"], dependencies=[Depends(require_import_key)])
# Templates are public; uploads need the import key.
templates_router = APIRouter(prefix="/import", tags=["import"])


async def _read_upload(file: UploadFile) -> bytes:
    """Read full content of uploaded file."""
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty file")
    return content


async def _parse(file: UploadFile, location_format: bool) -> list[dict[str, Any]]:
    try:
        content = await _read_upload(file)
        return parse_upload(content, file.filename, location_format=location_format)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


def _create_location_from_row(db: Session, data: dict[str, Any]) -> Location:
    """Create the location, its category and aspect ratings from a validated row in one commit."""
    category_id = None
    if data["category"]:
        category_id = get_or_create_category(db, data["category"]).id
    loc = repo_create_location(
        db,
        data["name"],
        data["latitude"],
        data["longitude"],
        data["id"],
        category_id=category_id,
        address=data["address"],
        opening_hours=data["opening_hours"],
        image=data["image"],
        summarized_review=data["summarized_review"],
        commit=False,
    )
    for aspect_name, rating in data["aspect_ratings"].items():
        aspect = get_or_create_aspect(db, aspect_name)
        set_aspect_rating(db, loc.id, aspect.id, rating, commit=False)
    db.commit()
    return loc


@router.post("/locations", response_model=ImportResult)
async def import_locations(file: UploadFile = File(...), db: Session = Depends(get_db)) -> ImportResult:
    """Upload CSV or JSON; import valid location rows; return success and failed lists."""
    rows = await _parse(file, location_format=True)
    success: list[dict[str, Any]] = []
    failed: list[ImportFailure] = []
    for i, row in enumerate(rows, start=1):
        ok, data, err = validate_location_row(row, db)
        if not ok:
            failed.append(ImportFailure(row=i, error=err, data=row))
            continue
        try:
            loc = _create_location_from_row(db, data)
        except IntegrityError as e:
            db.rollback()
            LOG.warning("Location import row %d rejected: %s", i, e.orig)
            failed.append(ImportFailure(row=i, error="Conflicting location", data=row))
            continue
        success.append({"id": loc.id, "name": loc.name})
    # New categories/aspects may have been created.
    app_cache.delete("categories")
    app_cache.delete("aspects")
    LOG.info("Location import: %d imported, %d failed", len(success), len(failed))
    return ImportResult(success=success, failed=failed)


@router.post("/reviews", response_model=ImportResult)
async def import_reviews(file: UploadFile = File(...), db: Session = Depends(get_db)) -> ImportResult:
    """Upload CSV or JSON of externally-sourced reviews; location ratings are recomputed."""
    rows = await _parse(file, location_format=False)
    success: list[dict[str, Any]] = []
    failed: list[ImportFailure] = []
    for i, row in enumerate(rows, start=1):
        ok, data, err = validate_review_row(row, db)
        if not ok:
            failed.append(ImportFailure(row=i, error=err, data=row))
            continue
        review = add_external_review(
            db,
            location_id=data["location_id"],
            rating=data["rating"],
            body=data["body"],
            extracted_date=data["extracted_date"],
        )
        invalidate_location(data["location_id"])
        success.append({"id": review.id, "locationId": review.location_id})
    LOG.info("Review import: %d imported, %d failed", len(success), len(failed))
    return ImportResult(success=success, failed=failed)


@templates_router.get("/templates/{filename}", response_class=Response)
def download_template(filename: str) -> Response:
    """Download an import template (locations or reviews, CSV or JSON)."""
    template = TEMPLATES.get(filename)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    content, media_type = template
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
