"""
FastAPI dependencies for authentication and authorization
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
import logging

from storefront.core.database import get_db
from storefront.core.security import decode_token
from storefront.models.user import Profile, UserRole

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer()


def _profile_from_token(token: str, db: Session) -> Optional[Profile]:
    payload = decode_token(token)
    if not payload or payload.get("type") != "access":
        return None

    user_id = payload.get("sub")
    if user_id is None:
        return None

    try:
        # JWT subject is a string, DB ID is int
        uid_int = int(user_id)
    except ValueError:
        logger.warning(f"Token subject {user_id!r} is not a valid integer")
        return None

    return db.query(Profile).filter(Profile.id == uid_int).first()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Profile:
    """
    Dependency to get current authenticated profile from JWT token

    Raises:
        HTTPException: If token is invalid or profile not found
    """
    user = _profile_from_token(credentials.credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
    db: Session = Depends(get_db)
) -> Optional[Profile]:
    """
    Dependency to get optional profile (for endpoints that work with or without auth)
    Returns None if no token provided or token is invalid
    """
    if not credentials:
        return None
    return _profile_from_token(credentials.credentials, db)


async def require_admin(
    current_user: Profile = Depends(get_current_user)
) -> Profile:
    """Dependency that only lets admins through"""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user
