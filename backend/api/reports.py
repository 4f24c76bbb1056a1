"""Report API routes."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.reviews import is_uuid
from db import get_db
from discovery_core.cache import invalidate_location
from models.report import Report
from repositories.location_repository import get_location
from repositories.report_repository import create_report, delete_report, get_report, get_user_report, list_reports
from repositories.user_repository import ensure_user
from schemas.reports import MessageResponse, ReportCreate, ReportLocation, ReportResponse, ReportUser
from utils.security import CurrentUser, get_current_user

router = APIRouter(prefix="/reports", tags=["reports"])

_DUPLICATE = "You have already reported this location"


def _report_to_response(report: Report) -> ReportResponse:
    return ReportResponse(
        id=report.id,
        locationId=report.location_id,
        userId=report.user_id,
        body=report.body,
        created=report.created,
        location=ReportLocation(name=report.location.name, image=report.location.image) if report.location else None,
        user=ReportUser(email=report.user.email, avatarUrl=report.user.avatar_url) if report.user else None,
    )


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
def create(
    body: ReportCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReportResponse:
    """Report a location (once per user)."""
    if get_location(db, body.locationId) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    if get_user_report(db, body.locationId, user.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_DUPLICATE)
    ensure_user(db, user.id, user.email, user.avatar_url)
    try:
        report = create_report(db, location_id=body.locationId, user_id=user.id, body=body.body)
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_DUPLICATE) from e
    invalidate_location(body.locationId)
    return _report_to_response(report)


@router.get("", response_model=list[ReportResponse])
def list_all(
    location_id: str | None = Query(default=None, alias="locationId"),
    user_id: str | None = Query(default=None, alias="userId"),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ReportResponse]:
    """Reports for a location and/or author, newest first."""
    if not location_id and not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either locationId or userId is required",
        )
    return [_report_to_response(r) for r in list_reports(db, location_id=location_id, user_id=user_id)]


@router.delete("/{report_id}", response_model=MessageResponse)
def delete(
    report_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete one of the caller's own reports."""
    if not is_uuid(report_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid report ID")
    report = get_report(db, report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    if report.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized to delete this report")
    location_id = report.location_id
    delete_report(db, report)
    invalidate_location(location_id)
    return MessageResponse(message="Report deleted successfully")
