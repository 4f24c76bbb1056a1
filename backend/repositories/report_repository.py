"""Report repository: one report per (location, author)."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.report import Report


def get_report(session: Session, report_id: str) -> Optional[Report]:
    """Return report by id or None."""
    return session.get(Report, report_id)


def get_user_report(session: Session, location_id: str, user_id: str) -> Optional[Report]:
    """Return this author's report for this location, or None."""
    return session.execute(
        select(Report).where(Report.location_id == location_id, Report.user_id == user_id)
    ).scalar_one_or_none()


def create_report(session: Session, *, location_id: str, user_id: str, body: str) -> Report:
    """Create a report, commit, and return it."""
    report = Report(location_id=location_id, user_id=user_id, body=body)
    session.add(report)
    session.commit()
    session.refresh(report)
    return report


def list_reports(
    session: Session,
    location_id: str | None = None,
    user_id: str | None = None,
) -> list[Report]:
    """Reports filtered by location and/or author, newest first."""
    stmt = select(Report)
    if location_id:
        stmt = stmt.where(Report.location_id == location_id)
    if user_id:
        stmt = stmt.where(Report.user_id == user_id)
    result = session.execute(stmt.order_by(Report.created.desc()))
    return list(result.scalars().all())


def delete_report(session: Session, report: Report) -> None:
    session.delete(report)
    session.commit()
