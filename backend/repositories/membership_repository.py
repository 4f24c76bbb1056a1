"""(user, location) membership lists: favorites and route stops share one shape."""
from typing import Optional, Union

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from models.user_location import Favorite, RouteStop

Membership = Union[Favorite, RouteStop]
MembershipModel = Union[type[Favorite], type[RouteStop]]


def list_memberships(session: Session, model: MembershipModel, user_id: str) -> list[Membership]:
    """All rows of this kind for a user, in insertion order."""
    result = session.execute(
        select(model).where(model.user_id == user_id).order_by(model.created_at, model.id)
    )
    return list(result.scalars().all())


def get_membership(
    session: Session, model: MembershipModel, user_id: str, location_id: str
) -> Optional[Membership]:
    return session.execute(
        select(model).where(model.user_id == user_id, model.location_id == location_id)
    ).scalar_one_or_none()


def add_membership(session: Session, model: MembershipModel, user_id: str, location_id: str) -> Membership:
    """Insert (user, location), commit, and return it. Duplicates raise IntegrityError."""
    row = model(user_id=user_id, location_id=location_id)
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def remove_membership(session: Session, model: MembershipModel, user_id: str, location_id: str) -> int:
    """Delete (user, location) if present. Returns number of rows removed."""
    result = session.execute(
        delete(model).where(model.user_id == user_id, model.location_id == location_id)
    )
    session.commit()
    return result.rowcount or 0


def clear_memberships(session: Session, model: MembershipModel, user_id: str) -> int:
    """Delete every row of this kind for a user. Returns number of rows removed."""
    result = session.execute(delete(model).where(model.user_id == user_id))
    session.commit()
    return result.rowcount or 0
