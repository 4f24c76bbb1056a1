"""Caller identity from identity-provider JWTs, and the catalogue import key."""
import hmac
import logging
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from utils import config

LOG = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller as asserted by the identity provider."""

    id: str
    email: str | None = None
    avatar_url: str | None = None


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> dict:
    """Verify signature, expiry and audience. Raises JWTError on any failure."""
    if not config.AUTH_JWT_SECRET:
        raise JWTError("AUTH_JWT_SECRET is not configured")
    return jwt.decode(
        token,
        config.AUTH_JWT_SECRET,
        algorithms=[config.AUTH_JWT_ALGORITHM],
        audience=config.AUTH_JWT_AUDIENCE,
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    """FastAPI dependency: the authenticated caller, or 401."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized()
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as e:
        LOG.info("Rejected access token: %s", e)
        raise _unauthorized() from e
    subject = payload.get("sub")
    if not subject:
        raise _unauthorized()
    metadata = payload.get("user_metadata") or {}
    return CurrentUser(
        id=str(subject),
        email=payload.get("email"),
        avatar_url=metadata.get("avatar_url") if isinstance(metadata, dict) else None,
    )


def require_import_key(x_import_key: str | None = Header(default=None)) -> None:
    """FastAPI dependency: 403 unless X-Import-Key matches the configured key."""
    expected = config.IMPORT_API_KEY
    if not expected or not x_import_key or not hmac.compare_digest(x_import_key, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Import is not permitted")
