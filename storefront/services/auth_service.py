"""
Authentication Service
Handles registration, login and token management
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
import logging

from storefront.models.user import Profile, UserRole
from storefront.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from storefront.core.config import settings
from storefront.core.exceptions import StoreError
from storefront.services.referral_service import ReferralService

logger = logging.getLogger(__name__)


class EmailTakenError(StoreError):
    """Registration with an email that already has a profile"""


class AuthService:
    """Service for authentication operations"""

    @staticmethod
    def create_user(
        db: Session,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        referral_code: Optional[str] = None
    ) -> Profile:
        """
        Create new profile

        Args:
            db: Database session
            email: Login email (unique)
            password: Plain password (will be hashed)
            full_name: Optional display name
            referral_code: Affiliate code of whoever referred this buyer

        Returns:
            Created Profile object

        Raises:
            EmailTakenError: email already registered
        """
        email = email.strip().lower()
        if db.query(Profile).filter(Profile.email == email).first():
            raise EmailTakenError(f"Email {email} is already registered")

        # The very first account runs the store
        is_first = db.query(Profile.id).first() is None

        user = Profile(
            email=email,
            password=get_password_hash(password),
            full_name=full_name,
            role=UserRole.ADMIN if is_first else UserRole.USER,
            balance=0,
        )

        db.add(user)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise EmailTakenError(f"Email {email} is already registered") from e
        db.refresh(user)

        if is_first:
            logger.info(f"First profile {user.id} registered as admin")

        if referral_code:
            ReferralService.attach_referrer(db, user, referral_code)

        return user

    @staticmethod
    def authenticate_user(
        db: Session,
        email: str,
        password: str
    ) -> Optional[Profile]:
        """
        Authenticate profile by email and password

        Returns:
            Profile if authenticated, None otherwise
        """
        user = db.query(Profile).filter(Profile.email == email.strip().lower()).first()

        if not user:
            return None

        if not verify_password(password, user.password):
            return None

        return user

    @staticmethod
    def create_tokens(user: Profile) -> dict:
        """
        Create access and refresh tokens for a profile

        Returns:
            Dict with access_token, refresh_token, token_type, expires_in
        """
        access_token = create_access_token(data={"sub": user.id})
        refresh_token = create_refresh_token(data={"sub": user.id})

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        }

    @staticmethod
    def refresh_access_token(refresh_token: str) -> Optional[str]:
        """
        Create new access token from refresh token

        Returns:
            New access token or None if invalid
        """
        payload = decode_token(refresh_token)

        if not payload or payload.get("type") != "refresh":
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None

        return create_access_token(data={"sub": user_id})
