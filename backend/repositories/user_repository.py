"""User repository: local mirror of identity-provider accounts."""
from typing import Optional

from sqlalchemy.orm import Session

from models.user import User


def get_user(session: Session, user_id: str) -> Optional[User]:
    """Return user by id or None."""
    return session.get(User, user_id)


def ensure_user(
    session: Session,
    user_id: str,
    email: str | None = None,
    avatar_url: str | None = None,
) -> User:
    """Return the user row for user_id, adding it (flushed, not committed) on first sight."""
    user = get_user(session, user_id)
    if user is None:
        user = User(id=user_id, email=email, avatar_url=avatar_url)
        session.add(user)
        session.flush()
    return user


def upsert_user(
    session: Session,
    user_id: str,
    email: str | None = None,
    avatar_url: str | None = None,
) -> User:
    """Create the user or refresh email/avatar from the latest token claims, then commit."""
    user = get_user(session, user_id)
    if user is None:
        user = User(id=user_id, email=email, avatar_url=avatar_url)
        session.add(user)
    else:
        if email:
            user.email = email
        user.avatar_url = avatar_url
    session.commit()
    session.refresh(user)
    return user
