"""
Referral API endpoints
Buyers referred by the current affiliate, and who referred the current user
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.dependencies import get_current_user
from storefront.models.user import Profile
from storefront.schemas.user import ReferredProfile
from storefront.services.referral_service import ReferralService
from storefront.utils.pagination import paginate, get_pagination_params
from storefront.utils.responses import paginated_response

router = APIRouter()


@router.get("/users/me/referrals", response_model=dict)
async def list_my_referrals(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Profiles that signed up or bought with my affiliate code

    - **page**: Page number
    - **per_page**: Items per page
    """
    page, per_page = get_pagination_params(page, per_page)
    items, total = paginate(ReferralService.referred_profiles_query(db, current_user), page, per_page)

    data = [ReferredProfile.model_validate(profile).model_dump() for profile in items]
    return paginated_response(data, page, per_page, total)


@router.get("/users/me/referrals/check-parent", response_model=dict)
async def check_parent_referral(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Who referred the current user, if anyone"""
    referrer = ReferralService.find_referrer(db, current_user)

    return {
        "ok": True,
        "data": {
            "has_parent": current_user.referred_by is not None,
            "referred_by": current_user.referred_by,
            "parent": {
                "id": referrer.id,
                "full_name": referrer.full_name,
                "affiliate_code": referrer.affiliate_code,
            } if referrer else None
        }
    }
