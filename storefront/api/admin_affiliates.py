"""
Admin affiliate API endpoints
Affiliate balances and manual payouts
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.dependencies import require_admin
from storefront.models.user import Profile
from storefront.schemas.commission import PayoutResponse
from storefront.schemas.user import ProfileResponse
from storefront.services.affiliate_service import AffiliateService, EmptyBalanceError, BalanceChangedError

router = APIRouter()


@router.get("/admin/affiliates", response_model=dict)
async def list_affiliates(
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Profiles with an affiliate code, highest balance first"""
    affiliates = AffiliateService.list_affiliates(db)
    return {
        "ok": True,
        "data": [ProfileResponse.model_validate(profile).model_dump() for profile in affiliates]
    }


@router.post("/admin/affiliates/{affiliate_id}/payout", response_model=dict)
async def pay_out_affiliate(
    affiliate_id: int,
    admin: Profile = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Mark the affiliate's balance as paid out and reset it to 0

    Returns 409 when a commission was credited since the balance was read.
    """
    affiliate = db.query(Profile).filter(Profile.id == affiliate_id).first()
    if not affiliate:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Affiliate not found"
        )

    try:
        payout = AffiliateService.reset_balance(db, affiliate)
    except EmptyBalanceError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except BalanceChangedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Balance reset",
        "data": PayoutResponse.model_validate(payout).model_dump()
    }
