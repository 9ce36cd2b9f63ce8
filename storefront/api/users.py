"""
Profile API endpoints
Profile, bank details and the buyer's own orders
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.dependencies import get_current_user
from storefront.models.user import Profile
from storefront.schemas.user import ProfileResponse, UpdateProfile
from storefront.schemas.order import OrderResponse
from storefront.services.affiliate_service import AffiliateService, AffiliateAlreadyActiveError
from storefront.services.order_service import OrderService
from storefront.utils.pagination import paginate, get_pagination_params
from storefront.utils.responses import paginated_response

router = APIRouter()


@router.get("/users/me", response_model=dict)
async def get_profile(
    current_user: Profile = Depends(get_current_user)
):
    """Current profile, including affiliate code and balance"""
    return {
        "ok": True,
        "data": ProfileResponse.model_validate(current_user).model_dump()
    }


@router.put("/users/me", response_model=dict)
async def update_profile(
    profile_data: UpdateProfile,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update profile and payout bank details

    Only the fields sent are changed.
    """
    for field, value in profile_data.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)

    return {
        "ok": True,
        "message": "Profile updated successfully",
        "data": ProfileResponse.model_validate(current_user).model_dump()
    }


@router.post("/users/me/affiliate", response_model=dict)
async def activate_affiliate(
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Join the affiliate program and get an affiliate code"""
    try:
        profile = AffiliateService.activate_affiliate(db, current_user)
    except AffiliateAlreadyActiveError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Affiliate program already active"
        )

    return {
        "ok": True,
        "message": "Affiliate program activated",
        "data": ProfileResponse.model_validate(profile).model_dump()
    }


@router.get("/orders/me", response_model=dict)
async def list_my_orders(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Orders placed while signed in, newest first"""
    page, per_page = get_pagination_params(page, per_page)
    items, total = paginate(OrderService.buyer_orders_query(db, current_user), page, per_page)

    data = [OrderResponse.model_validate(order).model_dump() for order in items]
    return paginated_response(data, page, per_page, total)
