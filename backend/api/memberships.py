"""Favorites and route-stop API routes. Both are per-user (user, location) lists."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db import get_db
from discovery_core.cache import app_cache, favorites_key, routes_key
from models.user_location import Favorite, RouteStop
from repositories.location_repository import get_location
from repositories.membership_repository import (
    MembershipModel,
    add_membership,
    clear_memberships,
    get_membership,
    list_memberships,
    remove_membership,
)
from repositories.user_repository import ensure_user
from schemas.memberships import MembershipCreate, MembershipItem, MembershipResponse, SuccessResponse
from schemas.reports import MessageResponse
from utils.security import CurrentUser, get_current_user

favorites_router = APIRouter(prefix="/favorites", tags=["favorites"])
routes_router = APIRouter(prefix="/routes", tags=["routes"])


def _list(db: Session, model: MembershipModel, cache_key: str, user_id: str) -> list[MembershipItem]:
    cached = app_cache.get(cache_key)
    if cached is not None:
        return [MembershipItem.model_validate(i) for i in cached]
    items = [MembershipItem(locationId=row.location_id) for row in list_memberships(db, model, user_id)]
    app_cache.set(cache_key, [i.model_dump() for i in items])
    return items


def _add(
    db: Session,
    model: MembershipModel,
    cache_key: str,
    user: CurrentUser,
    location_id: str,
    duplicate_detail: str,
) -> MembershipResponse:
    if get_location(db, location_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    if get_membership(db, model, user.id, location_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=duplicate_detail)
    ensure_user(db, user.id, user.email, user.avatar_url)
    try:
        row = add_membership(db, model, user.id, location_id)
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=duplicate_detail) from e
    app_cache.delete(cache_key)
    return MembershipResponse(id=row.id, userId=row.user_id, locationId=row.location_id, createdAt=row.created_at)


@favorites_router.get("", response_model=list[MembershipItem])
def list_favorites(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MembershipItem]:
    """The caller's favorite location ids."""
    return _list(db, Favorite, favorites_key(user.id), user.id)


@favorites_router.post("", response_model=MembershipResponse, status_code=status.HTTP_201_CREATED)
def add_favorite(
    body: MembershipCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MembershipResponse:
    """Add a location to the caller's favorites."""
    return _add(db, Favorite, favorites_key(user.id), user, body.locationId, "Location is already a favorite")


@favorites_router.delete("/{location_id}", response_model=SuccessResponse)
def remove_favorite(
    location_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    """Remove a location from the caller's favorites (no-op if absent)."""
    remove_membership(db, Favorite, user.id, location_id)
    app_cache.delete(favorites_key(user.id))
    return SuccessResponse()


@routes_router.get("", response_model=list[MembershipItem])
def list_route(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MembershipItem]:
    """The caller's route stops (location ids, insertion order)."""
    return _list(db, RouteStop, routes_key(user.id), user.id)


@routes_router.post("", response_model=MembershipResponse, status_code=status.HTTP_201_CREATED)
def add_route_stop(
    body: MembershipCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MembershipResponse:
    """Add a location to the caller's route."""
    return _add(db, RouteStop, routes_key(user.id), user, body.locationId, "Location is already on the route")


@routes_router.delete("/clear", response_model=MessageResponse)
def clear_route(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Remove every stop from the caller's route."""
    clear_memberships(db, RouteStop, user.id)
    app_cache.delete(routes_key(user.id))
    return MessageResponse(message="All routes cleared")


@routes_router.delete("/{location_id}", response_model=SuccessResponse)
def remove_route_stop(
    location_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    """Remove a location from the caller's route (no-op if absent)."""
    remove_membership(db, RouteStop, user.id, location_id)
    app_cache.delete(routes_key(user.id))
    return SuccessResponse()
