"""
Referral attribution

A referral code arrives on a link (?ref=CODE), is kept client-side in a
cookie (last touch wins) and is attached to the buyer's profile at signup
or checkout.
"""
from fastapi import Request
from sqlalchemy import false
from sqlalchemy.orm import Session
from typing import Optional
import logging

from storefront.core.config import settings
from storefront.models.user import Profile
from storefront.utils.helpers import normalize_code
from storefront.utils.persistence import compare_and_set

logger = logging.getLogger(__name__)


def get_pending_referral(request: Request) -> Optional[str]:
    """Referral code captured for this client, if any"""
    code = getattr(request.state, "referral_code", None) or request.cookies.get(settings.REFERRAL_COOKIE_NAME)
    return normalize_code(code) or None


class ReferralService:

    @staticmethod
    def attach_referrer(db: Session, profile: Profile, code: Optional[str]) -> bool:
        """
        Record who referred this profile

        Write-once: an existing referred_by is never replaced. A profile can
        not be referred by its own affiliate code.

        Returns:
            True if referred_by was set by this call
        """
        normalized = normalize_code(code)
        if not normalized:
            return False

        if profile.referred_by:
            return False

        if profile.affiliate_code and profile.affiliate_code == normalized:
            logger.info(f"Ignored self-referral for profile {profile.id}")
            return False

        # Conditional write so a concurrent attach can not overwrite
        attached = compare_and_set(db, Profile, profile.id, "referred_by", None, normalized)
        db.commit()
        db.refresh(profile)
        if attached:
            logger.info(f"Profile {profile.id} referred by {normalized}")
        return attached

    @staticmethod
    def find_referrer(db: Session, profile: Profile) -> Optional[Profile]:
        """Profile whose affiliate code this profile was referred by"""
        if not profile.referred_by:
            return None
        return db.query(Profile).filter(Profile.affiliate_code == profile.referred_by).first()

    @staticmethod
    def referred_profiles_query(db: Session, affiliate: Profile):
        if not affiliate.affiliate_code:
            return db.query(Profile).filter(false())
        return (
            db.query(Profile)
            .filter(Profile.referred_by == affiliate.affiliate_code)
            .order_by(Profile.created_at.desc(), Profile.id.desc())
        )
