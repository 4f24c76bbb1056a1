"""User API routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db import get_db
from repositories.user_repository import upsert_user
from schemas.users import UserEnvelope, UserResponse
from utils.security import CurrentUser, get_current_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/me", response_model=UserEnvelope)
def register_me(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserEnvelope:
    """Create or refresh the local user record from the caller's token claims."""
    row = upsert_user(db, user.id, email=user.email, avatar_url=user.avatar_url)
    return UserEnvelope(
        user=UserResponse(id=row.id, email=row.email, avatarUrl=row.avatar_url, createdAt=row.created_at)
    )
